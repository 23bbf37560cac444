from core.navigation import FolderNode
from utilities.licensing.activate import ActivateKey
from utilities.licensing.status import LicenseStatusView


class Licensing(FolderNode):
    CHILDREN = [
        LicenseStatusView(),
        ActivateKey(),
    ]

    def get_name(self) -> str:
        return "Windows licensing"
