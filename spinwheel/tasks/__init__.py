from spinwheel.tasks.notifications import deliver_coupon_email

__all__ = [
    'deliver_coupon_email',
]
