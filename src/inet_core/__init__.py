from inet_core import config as _config
from inet_core import domains as _domains
from inet_core import errors as _errors
from inet_core import graph as _graph
from inet_core import guards as _guards
from inet_core import metrics as _metrics
from inet_core.config import *
from inet_core.domains import *
from inet_core.errors import *
from inet_core.graph import *
from inet_core.guards import *
from inet_core.metrics import *
from inet_core.tree import Tree, parse, render

# inet_core.arrays (jax) is imported explicitly by callers.

__all__ = []
__all__ += _config.__all__
__all__ += [name for name in _domains.__all__ if not name.startswith("_")]
__all__ += _errors.__all__
__all__ += _graph.__all__
__all__ += _guards.__all__
__all__ += _metrics.__all__
__all__ += ["Tree", "parse", "render"]
