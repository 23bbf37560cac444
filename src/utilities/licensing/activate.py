from prompt_toolkit import choice, prompt
from prompt_toolkit.validation import Validator

from core.cli import run_activation
from core.navigation import NavigationNode
from scripts.activation_log import FALLBACK_LOG_PATH
from scripts.product_key import PRODUCT_KEY_PATTERN, ProductKey

key_validator = Validator.from_callable(
    lambda text: bool(PRODUCT_KEY_PATTERN.match(text.strip())),
    error_message='Expected format XXXXX-XXXXX-XXXXX-XXXXX-XXXXX',
    move_cursor_to_end=True,
)


class ActivateKey(NavigationNode):
    def get_name(self) -> str:
        return "Activate product key"

    def process(self):
        text = prompt('Product key: ', validator=key_validator, validate_while_typing=False)
        product_key = ProductKey.parse(text)

        log_file = prompt('Log file: ', default=str(FALLBACK_LOG_PATH)).strip()

        if choice(
                message=f'Install and activate {product_key.masked()}?',
                options=[(True, 'Activate'), (False, '[...]')],
        ) is not True:
            self.move_back()
            return

        print()
        run_activation(product_key, log_file or None)
        self.wait_back()
