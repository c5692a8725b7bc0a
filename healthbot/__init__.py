"""Core rule evaluation for the health bot.

This package turns a user's condition profile into a classified cafeteria
menu and a personalized set of health reminders. The domain and services
are pure and synchronous; adapters handle storage and presentation.
"""
