from colorama import Fore, Style

from core.cli import default_licensing
from core.navigation import NavigationNode
from scripts.licensing import LicensingError, format_status_reason


class LicenseStatusView(NavigationNode):
    def get_name(self) -> str:
        return "Status"

    def process(self):
        print()
        print("=" * 70)
        print("INSTALLED PRODUCT KEYS")
        print("=" * 70)

        try:
            products = default_licensing().list_installed_products()
        except LicensingError as e:
            print(f"{Fore.RED}Could not query licensing status: {e.message}{Style.RESET_ALL}")
            return self.wait_back()

        if not products:
            print(f"{Fore.YELLOW}No product keys installed.{Style.RESET_ALL}")

        for product in products:
            color = Fore.GREEN if product.is_licensed else Fore.YELLOW
            print(f"Name:          {product.name}")
            print(f"Partial key:   {product.partial_product_key}")
            print(f"Status:        {color}{product.status_text}{Style.RESET_ALL}")
            if not product.is_licensed:
                print(f"Reason:        {format_status_reason(product.license_status_reason)}")
            print("-" * 70)

        self.wait_back()
