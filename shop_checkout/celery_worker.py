# shop_checkout/celery_worker.py
from celery import Celery

from shop_checkout.utils.settings import (
    CART_SWEEP_INTERVAL_SECONDS,
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
)

celery_app = Celery(
    "shop_checkout",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# Explicite importuj taski, żeby Celery je zarejestrował
celery_app.conf.imports = (
    "shop_checkout.tasks.cart_sweep",
    "shop_checkout.services.notification_service",
)

# Sprzątanie koszyków po checkout (gdy delete po zamówieniu się nie udał)
celery_app.conf.beat_schedule = {
    "sweep-checked-out-carts": {
        "task": "shop_checkout.tasks.cart_sweep.sweep_carts_task",
        "schedule": CART_SWEEP_INTERVAL_SECONDS,
    },
}

celery_app.conf.timezone = "UTC"
