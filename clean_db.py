"""
Очистить базу данных от тестовых данных
"""
from app.infrastructure.db.session import get_db
from app.infrastructure.db.models import SubscriptionModel

db = next(get_db())

print("=== ОЧИСТКА БАЗЫ ДАННЫХ ===")

deleted = db.query(SubscriptionModel).delete()
print(f"✓ Удалено подписок: {deleted}")

db.commit()
print("\n✓ База очищена!")

db.close()
