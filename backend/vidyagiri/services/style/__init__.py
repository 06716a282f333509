from vidyagiri.services.style.selector import Directive, StyleSelector

__all__ = ["Directive", "StyleSelector"]
