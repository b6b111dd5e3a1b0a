"""Basic classification example using the built-in DI container."""

import asyncio

from instructly_classifier.core.config import ClassifierConfig
from instructly_classifier.core.container import DIContainer


async def main() -> None:
    service = DIContainer.create_service(
        config=ClassifierConfig(use_mock_ai=True, usage_db_path="demo_usage.db")
    )

    result = await service.analyze_topics(
        {
            "topics": ["Python syntax basics", "Compare learning theory frameworks"],
            "analysisType": "instructional_design",
        },
        user_id="demo-user",
    )
    for topic in result.topics:
        print(f"{topic.content}: {topic.classification.value}")
        print("  Methods:", ", ".join(topic.analysis.recommended_methods))
    print("Cost:", result.total_cost)
    print("Took (ms):", result.processing_time)
    print("Health:", service.health_check().status)


if __name__ == "__main__":
    asyncio.run(main())
