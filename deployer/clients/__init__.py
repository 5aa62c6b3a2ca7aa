# deployer/clients/__init__.py

from .interfaces import CanisterIdResolver, StaticResolver
from .dfx import DfxClient, network_flags
