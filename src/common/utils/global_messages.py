class GlobalMessages:
    # Auth Messages
    INVALID_CREDENTIALS = "Could not validate credentials"
    ADMIN_REQUIRED = "Not authorized to perform this action."
    INVALID_CRON_SECRET = "Invalid cron secret"

    # Gamification Messages
    POINTS_NOT_AWARDED = "Points could not be awarded."
    USER_NOT_FOUND = "User not found."
    DATA_ACCESS_FAILED = "The service is temporarily unable to reach its data store."

    # Reward Messages
    REWARD_NOT_FOUND = "Reward not found."
    REWARD_UNAVAILABLE = "Reward is not available."
    CLAIM_NOT_FOUND = "Claim not found."
    INSUFFICIENT_POINTS = "Not enough points to claim this reward."
    INVALID_CLAIM_TRANSITION = "The claim cannot move to that status."

    # Notification Messages
    NOTIFICATION_NOT_FOUND = "Notification not found."
    NOTIFICATION_MARKED_READ = "Notification marked as read."
    NOTIFICATIONS_MARKED_READ = "All notifications marked as read."

    # Finance Messages
    FINANCE_ENTRY_NOT_FOUND = "Finance entry not found."
    FINANCE_ENTRY_DELETED = "Finance entry deleted."

    # Goal Messages
    GOAL_NOT_FOUND = "Goal not found."
    GOAL_DELETED = "Goal deleted."
