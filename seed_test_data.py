"""
Seed demo subscriptions for two users.
Run:  python seed_test_data.py
"""
import uuid
from datetime import date

# ── bootstrap ────────────────────────────────────────────────────
from app.infrastructure.db.session import get_session_factory
from app.infrastructure.db.models import SubscriptionModel
from app.application.subscriptions import CreateSubscriptionUseCase
from app.application.total_cost import CalculateTotalCostUseCase
from app.infrastructure.subscriptions.repository import SqlSubscriptionCandidateStore

db = get_session_factory()()

ALICE = uuid.UUID("60601fee-2bf1-4721-ae6f-7636e79a0cba")
BOB = uuid.UUID("2f1b8c9e-7d43-4a1e-9c55-0e8f6b2a1d34")

# (service, cost, owner, start, end)
SUBSCRIPTIONS = [
    ("Yandex Plus", 400, ALICE, date(2025, 7, 1), None),
    ("Netflix", 990, ALICE, date(2025, 1, 1), date(2025, 6, 1)),
    ("Spotify", 299, BOB, date(2025, 3, 1), date(2025, 12, 1)),
    ("Yandex Plus", 400, BOB, date(2025, 9, 1), None),
]

existing = db.query(SubscriptionModel).count()
if existing > 0:
    print(f"Subscriptions already exist ({existing}), skipping insert")
else:
    uc = CreateSubscriptionUseCase(db)
    for service, cost, owner, start, end in SUBSCRIPTIONS:
        sub = uc.execute(service_name=service, cost_rub=cost, user_id=owner, start_date=start, end_date=end)
        print(f"  + {sub.service_name} {sub.cost_rub} руб. ({sub.id})")

total = CalculateTotalCostUseCase(SqlSubscriptionCandidateStore(db)).execute(
    owner_id=None, service_name=None,
    start_month=1, start_year=2025, end_month=12, end_year=2025,
)
print(f"✓ Total for 2025: {total} руб.")

db.close()
