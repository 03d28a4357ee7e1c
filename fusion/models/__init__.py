"""Data models for users, notification channels and notification logs."""