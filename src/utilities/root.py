from core.navigation import FolderNode
from utilities.licensing import Licensing


class RootNode(FolderNode):
    CHILDREN = [
        Licensing(),
    ]

    def get_name(self):
        return 'Root'
