# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Sends order notifications through Celery.

    Dispatch happens after the order transaction has committed, so a broker
    outage is logged and never undoes the order.
    """

    def send_order_notification(self, user_id: int, order_id: int, status: str) -> bool:
        try:
            send_order_notification_task.delay(user_id, order_id, status)
        except Exception as e:
            logger.warning(f"Could not queue notification for order {order_id}: {e}")
            return False
        return True


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, status: str):
    # a real deployment would hand this to an email/SMS/push gateway
    logger.info(
        f"[NOTIFICATION] User {user_id}: order {order_id} is {status}",
        extra={"user_id": user_id, "order_id": order_id},
    )
    return {"user_id": user_id, "order_id": order_id, "status": status, "sent": True}
