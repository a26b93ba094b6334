# src/router/routers.py

from fastapi import FastAPI
from src.modules.cron.cron_controller import router as cron_router
from src.modules.finances.finance_controller import router as finance_router
from src.modules.gamification.gamification_controller import router as gamification_router
from src.modules.gamification.gamification_controller import admin_router as admin_gamification_router
from src.modules.goals.goal_controller import router as goal_router
from src.modules.notifications.notification_controller import router as notification_router
from src.modules.notifications.notification_controller import admin_router as admin_notification_router
from src.modules.reports.report_controller import router as report_router
from src.modules.rewards.reward_controller import router as reward_router
from src.modules.rewards.reward_controller import admin_router as admin_reward_router
from src.modules.user.user_controller import router as user_router

def include_routers(app: FastAPI) -> None:
    app.include_router(cron_router)
    app.include_router(finance_router)
    app.include_router(gamification_router)
    app.include_router(admin_gamification_router)
    app.include_router(goal_router)
    app.include_router(notification_router)
    app.include_router(admin_notification_router)
    app.include_router(report_router)
    app.include_router(reward_router)
    app.include_router(admin_reward_router)
    app.include_router(user_router)
