"""NiceGUI interface - thin visualization layer for the career chatbot.

Responsibilities:
    - Sign-in and sign-up form with cached session restore
    - Sidebar chat list and new-chat creation
    - Message thread with optimistic delivery ticks
    - Input bar with PDF resume attachment

Contains minimal business logic. Delegates all operations to the API
through CareerBotClient.
"""
