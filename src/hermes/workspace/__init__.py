from hermes.workspace.service import Workspace
from hermes.workspace.store import ContentStore

__all__ = ["ContentStore", "Workspace"]
