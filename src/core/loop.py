from core.navigation import Navigator
from utilities.root import RootNode


def main_loop():
    navigator = Navigator(RootNode())

    while True:
        try:
            navigator.process()
        except (KeyboardInterrupt, EOFError):
            break

    print('bye')
