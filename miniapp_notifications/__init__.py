"""Push-notification service for the mini app.

Stores the notification credentials issued by the hosting client and sends
notifications through them.
"""
