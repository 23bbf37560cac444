import re
from dataclasses import dataclass

# Five groups of five alphanumerics separated by hyphens
PRODUCT_KEY_PATTERN = re.compile(r"^[A-Z0-9]{5}(-[A-Z0-9]{5}){4}$", re.IGNORECASE | re.ASCII)


class ProductKeyError(ValueError):
    pass


@dataclass(frozen=True)
class ProductKey:
    value: str

    @classmethod
    def parse(cls, text: str) -> "ProductKey":
        """Validate raw input and return an uppercase ProductKey."""
        cleaned = (text or "").strip()
        if not PRODUCT_KEY_PATTERN.match(cleaned):
            raise ProductKeyError(
                f"Invalid product key '{cleaned}'. Expected format XXXXX-XXXXX-XXXXX-XXXXX-XXXXX."
            )
        return cls(cleaned.upper())

    @property
    def partial_key(self) -> str:
        return self.value[-5:]

    def masked(self) -> str:
        """Key with every group but the last hidden, safe for log output."""
        return "XXXXX-XXXXX-XXXXX-XXXXX-" + self.partial_key

    def __str__(self) -> str:
        return self.value
