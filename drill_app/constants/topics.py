"""Static catalog of the topics drills can be taken on."""

from drill_app.core.models import QuizTopic

QUIZ_TOPICS: tuple[QuizTopic, ...] = (
    QuizTopic(
        id="gemma",
        name="Gemma",
        description="Test your knowledge of Google's Gemma language model and its applications",
        icon="🤖",
        color="#4285f4",
    ),
    QuizTopic(
        id="genkit",
        name="Genkit",
        description="Explore Firebase Genkit capabilities and AI application development",
        icon="⚡",
        color="#ff6d00",
    ),
    QuizTopic(
        id="firebase-ai",
        name="Firebase AI Logic",
        description="Client SDKs for Gemini and Imagen models with security features",
        icon="🔥",
        color="#ff9800",
    ),
    QuizTopic(
        id="vertex-ai",
        name="Vertex AI",
        description="Navigate Google Cloud's Vertex AI platform and ML capabilities",
        icon="🎯",
        color="#9c27b0",
    ),
    QuizTopic(
        id="adk",
        name="Agent Development Kit (ADK)",
        description="Flexible framework for developing and deploying AI agents",
        icon="🛠️",
        color="#00bcd4",
    ),
)
