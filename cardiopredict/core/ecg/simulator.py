"""
ECG Simulator Module

Synthesizes an ECG interpretation when a recording is attached to a request.
The recording itself is never parsed: rhythm, intervals and wave morphology
are drawn from fixed categorical distributions, and the findings derived from
them add a bounded risk contribution to every model score.
"""
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Sequence, Tuple
from enum import Enum

import numpy as np

from cardiopredict.core.random_source import RandomSource, weighted_choice
from cardiopredict.utils import get_logger

logger = get_logger(__name__)

NO_ABNORMALITIES = "No significant abnormalities"
MAX_RISK_CONTRIBUTION = 30


class Rhythm(str, Enum):
    """Cardiac rhythm categories."""
    NORMAL_SINUS = "Normal Sinus"
    SINUS_TACHYCARDIA = "Sinus Tachycardia"
    SINUS_BRADYCARDIA = "Sinus Bradycardia"
    ATRIAL_FIBRILLATION = "Atrial Fibrillation"
    ATRIAL_FLUTTER = "Atrial Flutter"


class STSegment(str, Enum):
    NORMAL = "Normal"
    ELEVATED = "Elevated"
    DEPRESSED = "Depressed"


class TWave(str, Enum):
    NORMAL = "Normal"
    INVERTED = "Inverted"
    PEAKED = "Peaked"


# Order matters: cumulative-subtraction selection walks this list
RHYTHM_WEIGHTS: Tuple[Tuple[Rhythm, float], ...] = (
    (Rhythm.NORMAL_SINUS, 0.45),
    (Rhythm.SINUS_TACHYCARDIA, 0.20),
    (Rhythm.SINUS_BRADYCARDIA, 0.10),
    (Rhythm.ATRIAL_FIBRILLATION, 0.15),
    (Rhythm.ATRIAL_FLUTTER, 0.10),
)

# (low, span): heart rate is low + round(span * u)
HEART_RATE_RANGES: Dict[Rhythm, Tuple[int, int]] = {
    Rhythm.SINUS_TACHYCARDIA: (100, 30),
    Rhythm.SINUS_BRADYCARDIA: (45, 15),
    Rhythm.ATRIAL_FIBRILLATION: (80, 70),
}
DEFAULT_HEART_RATE_RANGE = (60, 30)

PR_RANGE = (120, 80)
QRS_RANGE = (80, 50)
QT_RANGE = (350, 100)

RHYTHM_RISK_POINTS: Dict[Rhythm, int] = {
    Rhythm.ATRIAL_FIBRILLATION: 15,
    Rhythm.ATRIAL_FLUTTER: 12,
}
DEFAULT_RHYTHM_RISK_POINTS = 5


@dataclass(frozen=True)
class ECGAnalysis:
    """Synthetic ECG interpretation. A PR interval of 0 means not applicable."""
    heart_rate: int
    rhythm: Rhythm
    pr_interval: int  # ms
    qrs_duration: int  # ms
    qt_interval: int  # ms
    st_segment: STSegment
    t_wave: TWave
    findings: Tuple[str, ...] = field(default_factory=lambda: (NO_ABNORMALITIES,))
    risk_contribution: int = 0  # 0-30 additional risk points

    @property
    def is_abnormal(self) -> bool:
        """True unless the only finding is the no-abnormality sentinel."""
        return bool(self.findings) and self.findings[0] != NO_ABNORMALITIES

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "heart_rate": self.heart_rate,
            "rhythm": self.rhythm.value,
            "pr_interval": self.pr_interval,
            "qrs_duration": self.qrs_duration,
            "qt_interval": self.qt_interval,
            "st_segment": self.st_segment.value,
            "t_wave": self.t_wave.value,
            "findings": list(self.findings),
            "risk_contribution": self.risk_contribution,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ECGAnalysis":
        return cls(
            heart_rate=int(data["heart_rate"]),
            rhythm=Rhythm(data["rhythm"]),
            pr_interval=int(data["pr_interval"]),
            qrs_duration=int(data["qrs_duration"]),
            qt_interval=int(data["qt_interval"]),
            st_segment=STSegment(data["st_segment"]),
            t_wave=TWave(data["t_wave"]),
            findings=tuple(data.get("findings") or (NO_ABNORMALITIES,)),
            risk_contribution=int(data.get("risk_contribution", 0)),
        )


def interpret_findings(
    rhythm: Rhythm,
    heart_rate: int,
    pr_interval: int,
    qrs_duration: int,
    qt_interval: int,
    st_segment: STSegment,
    t_wave: TWave,
) -> Tuple[List[str], int]:
    """
    Apply the finding rules in order.

    Every rule is evaluated; each matching rule appends its finding and adds
    its points. Returns (findings, contribution) with the contribution capped
    at 30.
    """
    findings: List[str] = []
    total = 0

    if rhythm != Rhythm.NORMAL_SINUS:
        findings.append(f"{rhythm.value} detected")
        total += RHYTHM_RISK_POINTS.get(rhythm, DEFAULT_RHYTHM_RISK_POINTS)
    if heart_rate > 100:
        findings.append("Tachycardia")
        total += 4
    if heart_rate < 50:
        findings.append("Bradycardia")
        total += 3
    if pr_interval > 200:
        findings.append("Prolonged PR interval (possible 1st degree AV block)")
        total += 5
    if qrs_duration > 120:
        findings.append("Wide QRS complex")
        total += 6
    if qt_interval > 440:
        findings.append("Prolonged QT interval")
        total += 5
    if st_segment == STSegment.ELEVATED:
        findings.append("ST elevation (possible ischemia)")
        total += 10
    if st_segment == STSegment.DEPRESSED:
        findings.append("ST depression")
        total += 7
    if t_wave == TWave.INVERTED:
        findings.append("T-wave inversion")
        total += 5
    if t_wave == TWave.PEAKED:
        findings.append("Peaked T-waves")
        total += 4

    if not findings:
        findings.append(NO_ABNORMALITIES)

    return findings, min(MAX_RISK_CONTRIBUTION, total)


class ECGSimulator:
    """
    Generates synthetic ECG interpretations.

    All draws come from the injected RandomSource, in this order: rhythm,
    heart rate, PR interval (skipped for atrial fibrillation), QRS, QT,
    ST segment, T wave.
    """

    def __init__(self, random_source: RandomSource):
        self._random = random_source

    def simulate(self, rhythm: Optional[Rhythm] = None) -> ECGAnalysis:
        """
        Produce one ECG interpretation.

        Args:
            rhythm: Force a rhythm instead of drawing one

        Returns:
            ECGAnalysis with findings and a risk contribution in [0, 30]
        """
        if rhythm is None:
            rhythm = weighted_choice(self._random, RHYTHM_WEIGHTS)

        low, span = HEART_RATE_RANGES.get(rhythm, DEFAULT_HEART_RATE_RANGE)
        heart_rate = self._random.integer(low, span)

        if rhythm == Rhythm.ATRIAL_FIBRILLATION:
            pr_interval = 0  # no organized atrial activity
        else:
            pr_interval = self._random.integer(*PR_RANGE)

        qrs_duration = self._random.integer(*QRS_RANGE)
        qt_interval = self._random.integer(*QT_RANGE)

        # Normal sinus rhythm only reaches the first two morphologies, mostly "Normal"
        draw_width = 1.5 if rhythm == Rhythm.NORMAL_SINUS else 3.0
        st_segment = self._pick(list(STSegment), draw_width)
        t_wave = self._pick(list(TWave), draw_width)

        findings, contribution = interpret_findings(
            rhythm, heart_rate, pr_interval, qrs_duration, qt_interval, st_segment, t_wave
        )

        logger.debug(
            f"ECG simulated: rhythm={rhythm.value}, hr={heart_rate}, "
            f"findings={len(findings)}, contribution={contribution}"
        )

        return ECGAnalysis(
            heart_rate=heart_rate,
            rhythm=rhythm,
            pr_interval=pr_interval,
            qrs_duration=qrs_duration,
            qt_interval=qt_interval,
            st_segment=st_segment,
            t_wave=t_wave,
            findings=tuple(findings),
            risk_contribution=contribution,
        )

    def _pick(self, options: Sequence, draw_width: float):
        index = int(np.floor(self._random.random() * draw_width))
        return options[min(index, len(options) - 1)]
