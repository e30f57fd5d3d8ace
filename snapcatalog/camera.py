"""USB camera capture using OpenCV."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path


@dataclass
class CameraCapture:
    camera_index: int
    image: bytes  # JPEG
    captured_at: str  # ISO8601
    image_path: str | None = None


class ShopCamera:
    """Grab single still frames from the counter camera."""

    def __init__(
        self,
        camera_index: int = 0,
        save_dir: str | None = None,
        jpeg_quality: int = 80,
    ) -> None:
        self._camera_index = camera_index
        self._jpeg_quality = jpeg_quality
        self._save_dir = Path(save_dir) if save_dir else None
        if self._save_dir is not None:
            self._save_dir.mkdir(parents=True, exist_ok=True)

    def capture(self) -> CameraCapture:
        """Capture one frame and return it JPEG-encoded."""
        try:
            import cv2
        except ImportError:
            raise ImportError(
                "opencv-python is required: pip install opencv-python"
            ) from None

        cap = cv2.VideoCapture(self._camera_index)
        if not cap.isOpened():
            raise RuntimeError(
                f"Could not open camera {self._camera_index}. "
                f"Check that it is connected."
            )

        try:
            ret, frame = cap.read()
            if not ret or frame is None:
                raise RuntimeError(
                    f"Could not read a frame from camera {self._camera_index}."
                )

            ok, buf = cv2.imencode(
                ".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, self._jpeg_quality]
            )
            if not ok:
                raise RuntimeError("JPEG encoding of the captured frame failed.")
            data = buf.tobytes()

            now = datetime.now(timezone.utc)
            image_path = None
            if self._save_dir is not None:
                filename = f"scan{self._camera_index}_{now.strftime('%Y%m%d_%H%M%S_%f')}.jpg"
                filepath = self._save_dir / filename
                filepath.write_bytes(data)
                image_path = str(filepath)

            return CameraCapture(
                camera_index=self._camera_index,
                image=data,
                captured_at=now.isoformat(),
                image_path=image_path,
            )
        finally:
            cap.release()

    @staticmethod
    def list_cameras(max_check: int = 10) -> list[int]:
        """List available USB camera indices by probing."""
        try:
            import cv2
        except ImportError:
            raise ImportError(
                "opencv-python is required: pip install opencv-python"
            ) from None

        available: list[int] = []
        for i in range(max_check):
            cap = cv2.VideoCapture(i)
            if cap.isOpened():
                available.append(i)
                cap.release()
        return available
