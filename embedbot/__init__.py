"""Backend for embeddable website chatbots: turn handling on Gemini + Firestore."""

__version__ = "0.1.0"
