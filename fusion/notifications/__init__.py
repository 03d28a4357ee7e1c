"""Notification provider interface, message types and the webhook provider."""