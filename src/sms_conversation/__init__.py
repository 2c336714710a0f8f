"""SMS conversation window core for the device companion."""

__app_id__ = "sms-conversation"
__version__ = "0.1.0"
