# -*- coding: utf-8 -*-
"""
健康画布

The five wellness canvases; each targets one lifestyle dimension and
ships a default breathing pattern.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .patterns import (
    BOX_BREATHING,
    POWER_BREATHING,
    RELAXED_BREATHING,
    RUNNING_CADENCE,
    SLEEP_BREATHING_478,
    BreathingPattern,
)


class WellnessCanvas(str, Enum):
    """健康画布"""
    FLOW_STATE = "flowState"
    BETTER_SLEEP = "betterSleep"
    COMFORT_VISION = "comfortVision"
    ATHLETIC_PERFORMANCE = "athleticPerformance"
    METABOLISM_REPAIR = "metabolismRepair"

    @classmethod
    def parse(cls, value: str) -> Optional["WellnessCanvas"]:
        try:
            return cls(value)
        except ValueError:
            return None


class CanvasInfo(BaseModel):
    id: WellnessCanvas
    title: str
    subtitle: str
    icon_name: str
    accent_color_hex: str
    gradient_end_hex: str
    description: str
    benefits: List[str] = Field(default_factory=list)
    default_pattern_id: str
    default_duration_seconds: int


CANVAS_TITLES = {
    WellnessCanvas.FLOW_STATE: ("進入心流", "Flow State"),
    WellnessCanvas.BETTER_SLEEP: ("Better Sleep", "Sleep Quality"),
    WellnessCanvas.COMFORT_VISION: ("舒適使用", "Vision Pro Comfort"),
    WellnessCanvas.ATHLETIC_PERFORMANCE: ("運動提升", "Athletic Performance"),
    WellnessCanvas.METABOLISM_REPAIR: ("代謝修復", "Metabolism & Self-Repair"),
}

CANVAS_ICONS = {
    WellnessCanvas.FLOW_STATE: "brain.head.profile",
    WellnessCanvas.BETTER_SLEEP: "moon.zzz.fill",
    WellnessCanvas.COMFORT_VISION: "eye.fill",
    WellnessCanvas.ATHLETIC_PERFORMANCE: "figure.run",
    WellnessCanvas.METABOLISM_REPAIR: "bolt.heart.fill",
}

# (accent, gradient end)
CANVAS_COLORS = {
    WellnessCanvas.FLOW_STATE: ("#7C3AED", "#4F46E5"),  # violet
    WellnessCanvas.BETTER_SLEEP: ("#1E40AF", "#1E3A8A"),  # deep blue
    WellnessCanvas.COMFORT_VISION: ("#059669", "#047857"),  # emerald
    WellnessCanvas.ATHLETIC_PERFORMANCE: ("#DC2626", "#991B1B"),  # red
    WellnessCanvas.METABOLISM_REPAIR: ("#D97706", "#B45309"),  # amber
}

CANVAS_DESCRIPTIONS = {
    WellnessCanvas.FLOW_STATE: "透過引導式呼吸與專注計時，幫助你快速進入心流狀態，提升工作與創作效率。",
    WellnessCanvas.BETTER_SLEEP: "睡前放鬆呼吸法、環境優化建議，讓你擁有更深層的睡眠品質。",
    WellnessCanvas.COMFORT_VISION: "定時護眼運動、頸部伸展、姿勢提醒，讓你長時間使用 Vision Pro 也不會不舒服。",
    WellnessCanvas.ATHLETIC_PERFORMANCE: "運動前暖身呼吸、跑步節奏呼吸、間歇計時，全面提升你的運動表現。",
    WellnessCanvas.METABOLISM_REPAIR: "提升整體代謝與身體自我修復，達成更好的體態、更飽滿的臉龐、更少的紋路、促進膠原蛋白自我生成。",
}

CANVAS_BENEFITS = {
    WellnessCanvas.FLOW_STATE: ["更快速進入深度專注", "減少分心與思緒漫遊", "提升創作與工作產出", "建立穩定的專注習慣"],
    WellnessCanvas.BETTER_SLEEP: ["入睡時間縮短", "深層睡眠比例提升", "起床後精神飽滿", "減少半夜醒來次數"],
    WellnessCanvas.COMFORT_VISION: ["眼睛不會酸澀", "脖子不會僵硬", "長時間使用更舒適", "預防姿勢不良"],
    WellnessCanvas.ATHLETIC_PERFORMANCE: ["跑步耐力提升", "運動時呼吸更順暢", "恢復速度加快", "整體運動表現提升"],
    WellnessCanvas.METABOLISM_REPAIR: [
        "整體代謝提升",
        "身體自我修復加速",
        "體態更好 Better Shape",
        "臉龐更飽滿有光澤",
        "紋路逐漸變淺",
        "膠原蛋白自我產生",
    ],
}

DEFAULT_PATTERNS: Dict[WellnessCanvas, BreathingPattern] = {
    WellnessCanvas.FLOW_STATE: BOX_BREATHING,
    WellnessCanvas.BETTER_SLEEP: SLEEP_BREATHING_478,
    WellnessCanvas.COMFORT_VISION: RELAXED_BREATHING,
    WellnessCanvas.ATHLETIC_PERFORMANCE: RUNNING_CADENCE,
    WellnessCanvas.METABOLISM_REPAIR: POWER_BREATHING,
}

DEFAULT_DURATIONS = {
    WellnessCanvas.FLOW_STATE: 25 * 60,
    WellnessCanvas.BETTER_SLEEP: 10 * 60,
    WellnessCanvas.COMFORT_VISION: 5 * 60,  # eye break
    WellnessCanvas.ATHLETIC_PERFORMANCE: 3 * 60,  # warm-up
    WellnessCanvas.METABOLISM_REPAIR: 15 * 60,
}


def default_pattern(canvas: WellnessCanvas) -> BreathingPattern:
    return DEFAULT_PATTERNS[canvas]


def describe_canvas(canvas: WellnessCanvas) -> CanvasInfo:
    title, subtitle = CANVAS_TITLES[canvas]
    accent, gradient_end = CANVAS_COLORS[canvas]
    return CanvasInfo(
        id=canvas,
        title=title,
        subtitle=subtitle,
        icon_name=CANVAS_ICONS[canvas],
        accent_color_hex=accent,
        gradient_end_hex=gradient_end,
        description=CANVAS_DESCRIPTIONS[canvas],
        benefits=list(CANVAS_BENEFITS[canvas]),
        default_pattern_id=DEFAULT_PATTERNS[canvas].id,
        default_duration_seconds=DEFAULT_DURATIONS[canvas],
    )
