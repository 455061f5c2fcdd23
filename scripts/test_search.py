"""
Тестовый скрипт для проверки поискового сервиса
Загружает демо-документы и проверяет поиск, опечатки и чат
"""
import asyncio
import os
import httpx


API_URL = os.environ.get("API_URL", "http://localhost:8080")


# Тестовые документы (в дополнение к демо-данным сервиса)
DEMO_DOCUMENTS = [
    {
        "name": "Acceptable Use Policy",
        "content": "Company devices are for business use. Installing unapproved software is prohibited.",
        "description": "Rules for using company equipment and networks",
        "category": "Compliance",
        "document_type": "policy",
        "tags": ["devices", "software", "network"],
    },
    {
        "name": "Email Security Awareness",
        "content": "Verify sender identity, be cautious of links and attachments, "
                   "and report suspicious emails to the security team immediately.",
        "description": "Phishing and email safety basics",
        "category": "Onboarding",
        "document_type": "onboarding",
        "tags": ["email", "phishing", "awareness"],
    },
]


async def load_demo_documents():
    """Загрузка тестовых документов"""
    print("\n📦 Загрузка тестовых документов...")

    async with httpx.AsyncClient() as client:
        for document in DEMO_DOCUMENTS:
            response = await client.post(f"{API_URL}/api/v1/documents", json=document)

            if response.status_code == 201:
                print(f"✓ Создан документ #{response.json()['id']}: {document['name']}")
            else:
                print(f"✗ Ошибка: {response.text}")


async def test_search(query: str, **filters):
    """Тестирование поиска"""
    print(f"\n🔍 Поиск: '{query}' {filters or ''}")

    async with httpx.AsyncClient() as client:
        response = await client.get(
            f"{API_URL}/api/v1/documents/search",
            params={"q": query, "limit": 5, **filters}
        )

        if response.status_code == 200:
            result = response.json()
            meta = result["meta"]
            print(f"   Найдено: {result['total']} документов за {meta['took_ms']}ms, термы: {meta['tokens']}")
            if meta["fuzzy_terms"]:
                print(f"   С опечатками: {', '.join(meta['fuzzy_terms'])}")

            for i, item in enumerate(result["matches"][:3], 1):
                fields = ", ".join(sorted({m["field"] for m in item["matches"]}))
                print(f"   {i}. {item['document']['name']}")
                print(f"      Скор: {item['score']} | Поля: {fields}")
        else:
            print(f"   ✗ Ошибка: {response.text}")


async def test_chat(message: str):
    """Тестирование чат-бота"""
    print(f"\n💬 Чат: '{message}'")

    async with httpx.AsyncClient() as client:
        response = await client.post(
            f"{API_URL}/api/v1/chat",
            json={"message": message, "type": "policy_search"}
        )

        if response.status_code == 200:
            result = response.json()
            print(f"   {result['response']}")
            for document in result["policy_files"][:3]:
                print(f"   - {document['name']}")
        else:
            print(f"   ✗ Ошибка: {response.text}")


async def main():
    """Главная функция"""
    print("=" * 60)
    print("🚀 Тестирование поиска по политикам")
    print("=" * 60)

    # Проверка доступности API
    print("\n🔌 Проверка подключения к API...")
    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(f"{API_URL}/health", timeout=5.0)
            if response.status_code == 200:
                print(f"✓ API доступен, индекс: {response.json()['index']}")
            else:
                print("✗ API недоступен")
                return
    except httpx.HTTPError as e:
        print(f"✗ Ошибка подключения: {e}")
        print("\nУбедитесь, что сервис запущен:")
        print("  uvicorn policy_search.api.main:app --port 8080")
        return

    await load_demo_documents()

    print("\n" + "=" * 60)
    print("ТЕСТЫ ПОИСКА")
    print("=" * 60)

    await test_search("password")
    await test_search("passwrd")
    await test_search("vpn setup")
    await test_search("encryption", type="policy")
    await test_search("security", category="onboarding")
    await test_search("xyz123")

    print("\n" + "=" * 60)
    print("ТЕСТЫ ЧАТА")
    print("=" * 60)

    await test_chat("incident reporting")
    await test_chat("the and of")

    print("\n" + "=" * 60)
    print("✓ Все тесты завершены!")
    print("=" * 60)
    print(f"\nДокументация: {API_URL}/docs")


if __name__ == "__main__":
    asyncio.run(main())
