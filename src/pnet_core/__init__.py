from pnet_core import config as _config
from pnet_core import domains as _domains
from pnet_core import network as _network
from pnet_core import trie as _trie
from pnet_core.config import *
from pnet_core.domains import *
from pnet_core.network import *
from pnet_core.trie import *

__all__ = []
__all__ += _config.__all__
__all__ += [name for name in _domains.__all__ if not name.startswith("_")]
__all__ += _trie.__all__
__all__ += _network.__all__
