"""
dependencies.py

FastAPI dependency providers.

Settings are loaded once in create_app() and stored on app.state.
Routes receive them (and the Gemini client built from them) through
Depends(), so tests can swap either one with app.dependency_overrides.
"""

from fastapi import Depends, Request

from checkvision.config import Settings
from checkvision.services.gemini import GeminiClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_gemini_client(settings: Settings = Depends(get_settings)) -> GeminiClient:
    # Building the client does not touch the network
    return GeminiClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        api_base=settings.gemini_api_base
    )
