"""Receiver allow-list and method renames for the purego-sdl3 bindings."""

from __future__ import annotations

from typing import Mapping

_SDL = "github.com/jupiterrider/purego-sdl3/sdl"

DEFAULT_PKG = _SDL

DEFAULT_RECEIVER_TYPES: frozenset[str] = frozenset(
    f"*{_SDL}.{name}" for name in ("Camera", "Cursor", "Renderer", "Surface", "Texture", "Window")
)

DEFAULT_RENAMES: Mapping[str, str] = {
    # Camera
    "AcquireCameraFrame": "AcquireFrame",
    "CloseCamera": "Close",
    "ReleaseCameraFrame": "ReleaseFrame",
    # Cursor
    "DestroyCursor": "Destroy",
    # Renderer
    "GetRendererName": "GetName",
    "DestroyRenderer": "Destroy",
    "RenderClear": "Clear",
    "RenderPresent": "Present",
    "SetRenderDrawColor": "SetDrawColor",
    "SetRenderVSync": "SetVSync",
    # Surface
    "BlitSurface": "Blit",
    "DestroySurface": "Destroy",
    "LockSurface": "Lock",
    "UnlockSurface": "Unlock",
    # Texture
    "DestroyTexture": "Destroy",
    # Window
    "DestroyWindow": "Destroy",
    "GetWindowSize": "GetSize",
    "GetWindowSurface": "GetSurface",
    "HideWindow": "Hide",
    "SetWindowSize": "SetSize",
    "ShowWindow": "Show",
    "UpdateWindowSurface": "UpdateSurface",
}


def method_name(func_name: str, renames: Mapping[str, str]) -> str:
    return renames.get(func_name, func_name)
