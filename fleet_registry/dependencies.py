from datetime import date


async def get_today() -> date:
    """Calendar date used for the model-year ceiling; overridden in tests."""
    return date.today()
