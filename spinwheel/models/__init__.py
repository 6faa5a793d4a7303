from spinwheel.models.spin import Spin

__all__ = [
    "Spin",
]
