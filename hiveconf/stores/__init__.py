"""
Hierarchical store backends.

Importing this package registers the built-in backends ('memory', 'yaml',
'winreg') with the store registry.
"""

from hiveconf.stores.tree import MemoryStore, YamlFileStore, TreeStore
from hiveconf.stores.windows import WindowsRegistryStore
