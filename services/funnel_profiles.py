from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class FunnelType(str, Enum):
    tof = "TOF"
    mof = "MOF"
    eof = "EOF"


@dataclass(frozen=True)
class FunnelProfile:
    word_count: str
    linkedin_count: str
    tone: str
    goal: str
    structure: str


FUNNEL_PROFILES: Mapping[FunnelType, FunnelProfile] = MappingProxyType(
    {
        FunnelType.tof: FunnelProfile(
            word_count="1200-1500",
            linkedin_count="150-200",
            tone="Light, relatable, conversational with humor",
            goal="Maximum engagement and dwell time",
            structure="Hook → Problem → Stories → Insights → CTA",
        ),
        FunnelType.mof: FunnelProfile(
            word_count="1500-2000",
            linkedin_count="250-350",
            tone="Professional but approachable, authoritative",
            goal="Establish expertise and attract peer connections",
            structure="Context → Analysis → Framework → Implementation → CTA",
        ),
        FunnelType.eof: FunnelProfile(
            word_count="2000-2500",
            linkedin_count="300-400",
            tone="Professional, results-focused, credible",
            goal="Generate leads and consultation requests",
            structure="Challenge → Approach → Implementation → Results → CTA",
        ),
    }
)
