# src/modules/gamification/catalog.py

"""
Static gamification tables: levels, point-earning actions and achievements.

They ship with the application and are never persisted. Keys are closed
enumerations, so API input naming an unknown action or achievement is
rejected by validation before it reaches the ledger.
"""

import enum
from dataclasses import dataclass
from typing import Dict, List, Optional

class AchievementCategory(enum.Enum):
    LIBRARY = "library"
    TOOLS = "tools"
    ENGAGEMENT = "engagement"

class ActionType(str, enum.Enum):
    VIDEO_WATCHED = "video_watched"
    EXERCISE_COMPLETED = "exercise_completed"
    MODULE_COMPLETED = "module_completed"
    DAILY_LOGIN = "daily_login"
    PROFILE_UPDATED = "profile_updated"
    FIRST_TRANSACTION = "first_transaction"
    BATCH_IMPORT = "batch_import"

class AchievementKey(str, enum.Enum):
    FIRST_VIDEO = "first_video"
    VIDEOS_10 = "videos_10"
    VIDEOS_50 = "videos_50"
    FIRST_MODULE = "first_module"
    ALL_MODULES = "all_modules"
    FIRST_BANK = "first_bank"
    FIRST_GOAL = "first_goal"
    FULL_CONTROL = "full_control"
    FIRST_INVESTMENT = "first_investment"
    BATCH_IMPORT = "batch_import"
    WELCOME = "welcome"
    STREAK_7 = "streak_7"
    STREAK_30 = "streak_30"
    PROFILE_COMPLETE = "profile_complete"

@dataclass(frozen=True)
class LevelDefinition:
    level: int
    name: str
    min_xp: int
    icon: str

@dataclass(frozen=True)
class ActionDefinition:
    points: int
    description: str

@dataclass(frozen=True)
class AchievementDefinition:
    key: AchievementKey
    name: str
    description: str
    icon: str
    category: AchievementCategory
    xp_reward: int

# Ordered by level; min_xp never decreases.
LEVELS: List[LevelDefinition] = [
    LevelDefinition(1, "Iniciante", 0, "🥉"),
    LevelDefinition(2, "Aprendiz", 200, "🥉"),
    LevelDefinition(3, "Praticante", 500, "🥈"),
    LevelDefinition(4, "Dedicado", 1000, "🥈"),
    LevelDefinition(5, "Expert", 2000, "🥇"),
    LevelDefinition(6, "Mestre", 4000, "🥇"),
    LevelDefinition(7, "Lenda Financeira", 8000, "💎"),
]

ACTION_POINTS: Dict[ActionType, ActionDefinition] = {
    ActionType.VIDEO_WATCHED: ActionDefinition(20, "Assistiu vídeo"),
    ActionType.EXERCISE_COMPLETED: ActionDefinition(30, "Completou exercício"),
    ActionType.MODULE_COMPLETED: ActionDefinition(100, "Completou módulo"),
    ActionType.DAILY_LOGIN: ActionDefinition(10, "Login diário"),
    ActionType.PROFILE_UPDATED: ActionDefinition(20, "Atualizou perfil"),
    ActionType.FIRST_TRANSACTION: ActionDefinition(30, "Primeiro lançamento"),
    ActionType.BATCH_IMPORT: ActionDefinition(40, "Lançamento em lote"),
}

_library = AchievementCategory.LIBRARY
_tools = AchievementCategory.TOOLS
_engagement = AchievementCategory.ENGAGEMENT

ACHIEVEMENTS: List[AchievementDefinition] = [
    # Biblioteca
    AchievementDefinition(AchievementKey.FIRST_VIDEO, "Primeiro Passo", "Assistir primeiro vídeo", "🎬", _library, 20),
    AchievementDefinition(AchievementKey.VIDEOS_10, "Estudioso", "Assistir 10 vídeos", "📚", _library, 100),
    AchievementDefinition(AchievementKey.VIDEOS_50, "Maratonista", "Assistir 50 vídeos", "🏃", _library, 300),
    AchievementDefinition(AchievementKey.FIRST_MODULE, "Módulo Concluído", "Completar 1 módulo", "🎓", _library, 100),
    AchievementDefinition(AchievementKey.ALL_MODULES, "Formando", "Completar todos os módulos", "🏆", _library, 500),
    # Ferramentas
    AchievementDefinition(AchievementKey.FIRST_BANK, "Organizado", "Cadastrar banco ou cartão", "🏦", _tools, 50),
    AchievementDefinition(AchievementKey.FIRST_GOAL, "Planejador", "Criar primeiro objetivo", "🎯", _tools, 50),
    AchievementDefinition(AchievementKey.FULL_CONTROL, "Controle Total", "Ter objetivo + orçamento + redução", "📊", _tools, 150),
    AchievementDefinition(AchievementKey.FIRST_INVESTMENT, "Investidor", "Cadastrar investimentos", "💰", _tools, 50),
    AchievementDefinition(AchievementKey.BATCH_IMPORT, "Importador Pro", "Usar lançamento em lote", "📥", _tools, 40),
    # Engajamento
    AchievementDefinition(AchievementKey.WELCOME, "Boas-vindas", "Primeiro login", "👋", _engagement, 10),
    AchievementDefinition(AchievementKey.STREAK_7, "Frequente", "7 dias consecutivos", "🔥", _engagement, 100),
    AchievementDefinition(AchievementKey.STREAK_30, "Comprometido", "30 dias consecutivos", "⭐", _engagement, 500),
    AchievementDefinition(AchievementKey.PROFILE_COMPLETE, "Perfil Completo", "Preencher todos os dados", "✅", _engagement, 50),
]

ACHIEVEMENTS_BY_KEY: Dict[str, AchievementDefinition] = {a.key.value: a for a in ACHIEVEMENTS}

def achievement_action_type(key: str) -> str:
    """Ledger action_type used for the XP granted by an achievement unlock."""
    return f"achievement_{key}"

def get_action(action_type) -> Optional[ActionDefinition]:
    try:
        return ACTION_POINTS[ActionType(action_type)]
    except ValueError:
        return None

def get_achievement(key) -> Optional[AchievementDefinition]:
    if isinstance(key, AchievementKey):
        key = key.value
    return ACHIEVEMENTS_BY_KEY.get(key)

def get_current_level(total_xp: int) -> LevelDefinition:
    """
    Highest level whose min_xp is <= total_xp.

    A negative total (deductions outweighing earned XP) matches nothing and
    falls back to level 1.
    """
    for level in sorted(LEVELS, key=lambda l: l.min_xp, reverse=True):
        if total_xp >= level.min_xp:
            return level
    return LEVELS[0]

def get_next_level(current: LevelDefinition) -> Optional[LevelDefinition]:
    for level in LEVELS:
        if level.level == current.level + 1:
            return level
    return None

def get_xp_progress(total_xp: int) -> float:
    """Percentage (0-100) of the way from the current level to the next."""
    current = get_current_level(total_xp)
    next_level = get_next_level(current)
    if next_level is None:
        return 100.0
    xp_into_level = total_xp - current.min_xp
    xp_needed = next_level.min_xp - current.min_xp
    return max(0.0, min(100.0, xp_into_level / xp_needed * 100))
