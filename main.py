"""
Console entry point for the Extreme Fit bag
"""
from config import Settings, configure_logging
from core.bag_screen import BagScreen
from payments.capability import load_payment_capability
from ui.simple_ui import SimpleBagUI, console_approval


def main():
    # Build the bag from the environment and hand it to the console UI
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    capability = load_payment_capability(settings, approval_handler=console_approval)
    bag = BagScreen(settings, capability)
    print(f"=== Extreme Fit Bag ({bag.platform_mode.value}) ===")
    SimpleBagUI(bag).run()


if __name__ == "__main__":
    main()
