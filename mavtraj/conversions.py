"""Conversion between segment lists and polynomial trajectory messages."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np

from mavtraj.polynomial import Polynomial
from mavtraj.segment import Segment

Coefficients = tuple[float, ...]


def _as_coefficients(values: Iterable[float]) -> Coefficients:
    return tuple(float(v) for v in np.asarray(list(values), dtype=float).reshape(-1))


@dataclass
class PolynomialSegmentMessage:
    """One segment: coefficient lists per axis, increasing powers of t."""

    x: Coefficients = ()
    y: Coefficients = ()
    z: Coefficients = ()
    yaw: Coefficients = ()
    rx: Coefficients = ()
    ry: Coefficients = ()
    rz: Coefficients = ()
    num_coeffs: int = 0
    segment_time_ns: int = 0

    def __post_init__(self) -> None:
        for name in ("x", "y", "z", "yaw", "rx", "ry", "rz"):
            setattr(self, name, _as_coefficients(getattr(self, name)))
        self.num_coeffs = int(self.num_coeffs)
        self.segment_time_ns = int(self.segment_time_ns)


@dataclass
class PolynomialTrajectoryMessage:
    """A trajectory as a sequence of segment messages."""

    segments: list[PolynomialSegmentMessage] = field(default_factory=list)
    frame_id: str = ""


def _segment_to_message(segment: Segment, with_rotation: bool) -> PolynomialSegmentMessage:
    message = PolynomialSegmentMessage(
        x=segment[0].coefficients,
        y=segment[1].coefficients,
        z=segment[2].coefficients,
        num_coeffs=segment.n,
        segment_time_ns=segment.time_ns,
    )
    if segment.dimension == 4:
        message.yaw = _as_coefficients(segment[3].coefficients)
    elif with_rotation and segment.dimension == 6:
        message.rx = _as_coefficients(segment[3].coefficients)
        message.ry = _as_coefficients(segment[4].coefficients)
        message.rz = _as_coefficients(segment[5].coefficients)
    return message


def trajectory_to_message(segments: Iterable[Segment]) -> PolynomialTrajectoryMessage:
    """Message for segments of dimension 3 (position), 4 (+ yaw) or 6 (+ rotation)."""
    messages = []
    for segment in segments:
        if segment.dimension not in (3, 4, 6):
            raise ValueError(
                "Dimension of position segment has to be 3, 4 or 6, but is "
                f"{segment.dimension}"
            )
        messages.append(_segment_to_message(segment, with_rotation=True))
    return PolynomialTrajectoryMessage(segments=messages)


def trajectory_to_message_4d(segments: Iterable[Segment]) -> PolynomialTrajectoryMessage:
    """Message for segments of dimension 3 (position) or 4 (position and yaw)."""
    messages = []
    for segment in segments:
        if segment.dimension not in (3, 4):
            raise ValueError(
                "Dimension of position segment has to be 3 or 4, but is "
                f"{segment.dimension}"
            )
        messages.append(_segment_to_message(segment, with_rotation=False))
    return PolynomialTrajectoryMessage(segments=messages)


def _build_segment(
    message: PolynomialSegmentMessage, axes: Sequence[Coefficients]
) -> Segment:
    segment = Segment(len(message.x), len(axes))
    for index, coefficients in enumerate(axes):
        segment[index] = Polynomial(coefficients)
    segment.time_ns = message.segment_time_ns
    return segment


def message_to_trajectory(message: PolynomialTrajectoryMessage) -> list[Segment]:
    """Segments from a message; rotation axes win over yaw when all are present."""
    segments = []
    for segment_message in message.segments:
        axes: list[Coefficients] = [segment_message.x, segment_message.y, segment_message.z]
        if segment_message.rx and segment_message.ry and segment_message.rz:
            axes += [segment_message.rx, segment_message.ry, segment_message.rz]
        elif segment_message.yaw:
            axes.append(segment_message.yaw)
        segments.append(_build_segment(segment_message, axes))
    return segments


def message_4d_to_trajectory(message: PolynomialTrajectoryMessage) -> list[Segment]:
    """Segments of dimension 3, or 4 when yaw coefficients are present."""
    segments = []
    for segment_message in message.segments:
        axes: list[Coefficients] = [segment_message.x, segment_message.y, segment_message.z]
        if segment_message.yaw:
            axes.append(segment_message.yaw)
        segments.append(_build_segment(segment_message, axes))
    return segments