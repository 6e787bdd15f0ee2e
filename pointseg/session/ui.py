# pointseg/session/ui.py
"""
Prompt point placement using OpenCV mouse callbacks.

Controls:
- Left click: add foreground point
- Shift/Ctrl/Alt + left click: add background point
- 'r': run segmentation
- 'z': undo last point
- 'c': clear points
- 'p': export mask PNG
- 'g': export polygon (GeoJSON)
- 'n': next image
- 'q': quit
"""
from __future__ import annotations

import cv2

from pointseg.engine.prompts import PointLabel
from pointseg.session.state import SegmentationSession


HELP_TEXT = "LClick=FG | Shift/Ctrl/Alt+LClick=BG | r=run z=undo c=clear p=png g=polygon n=next q=quit"

BG_MODIFIERS = cv2.EVENT_FLAG_SHIFTKEY | cv2.EVENT_FLAG_CTRLKEY | cv2.EVENT_FLAG_ALTKEY


def label_for_click(flags: int) -> PointLabel:
    """Any modifier held -> background point."""
    return PointLabel.BACKGROUND if int(flags) & BG_MODIFIERS else PointLabel.FOREGROUND


def attach_point_callback(window_name: str, session: SegmentationSession) -> None:
    def on_mouse(event, x, y, flags, param):
        if event == cv2.EVENT_LBUTTONDOWN and session.image is not None:
            session.add_point(x, y, label_for_click(flags))

    cv2.setMouseCallback(window_name, on_mouse)


def detach_callback(window_name: str) -> None:
    cv2.setMouseCallback(window_name, lambda *args: None)
