"""Formatting directives per learning style."""
from types import MappingProxyType
from typing import Mapping

from vidyagiri.schemas.query import VarkStyle

STYLE_PROMPTS: Mapping[VarkStyle, str] = MappingProxyType({
    VarkStyle.VISUAL: """Format the response with emphasis on visual organization:
- Use bullet points, numbered lists, and clear hierarchies.
- Include suggestions for diagrams, charts, or mind maps where applicable.
- Organize information in a structured, visual manner.
- Avoid lengthy paragraphs.
- Use spatial organization and layout to convey relationships.""",
    VarkStyle.AUDITORY: """Format the response for auditory learners:
- Emphasize verbal explanations and discussions.
- Suggest audio resources and verbal exercises.
- Include dialogue-style explanations.
- Recommend group discussions and verbal practice.
- Format as if explaining in a conversation.""",
    VarkStyle.READ_WRITE: """Format the response for read/write learners:
- Provide detailed written explanations.
- Include relevant terminology and definitions.
- Organize information in text-based formats.
- Suggest reading materials and writing exercises.
- Use clear, concise written language.""",
    VarkStyle.KINESTHETIC: """Format the response for kinesthetic learners:
- Provide a brief definition of the topic.
- Include links to labs, interactive tools, or simulations where users can gain hands-on experience.
- Focus on practical applications and real-world scenarios.
- Avoid lengthy explanations.""",
})

FOLLOW_UP_FOCUS: Mapping[VarkStyle, str] = MappingProxyType({
    VarkStyle.VISUAL: "Focus on visualization and diagram-related questions",
    VarkStyle.AUDITORY: "Focus on discussion and verbal explanation questions",
    VarkStyle.READ_WRITE: "Focus on reading and writing-based questions",
    VarkStyle.KINESTHETIC: "Focus on practical application and hands-on activity questions",
})

STANDARD_INSTRUCTION = 'Here is my query "{query}", respond back with an answer that is as long as possible.'

AUDIO_INSTRUCTION = (
    'Here is my query "{query}", respond back with an answer that is spoken as if you\'re '
    "having a natural, friendly conversation with someone. Your tone should be warm and "
    "approachable, similar to a teacher explaining a topic in simple, clear language. Use "
    "everyday words and break down complex ideas into smaller, digestible parts to make the "
    "content easy to understand for audio learners. Aim to create an engaging, supportive "
    "learning experience that feels personal and encouraging."
)

KINESTHETIC_INSTRUCTION = (
    'Here is my query "{query}", respond back with a brief definition of the topic and '
    "include links to popular learning platforms where users can gain hands-on experience. "
    "Ensure the URLs are plain and do not contain any additional formatting or special characters."
)

CITATION_INSTRUCTION = "Return the sources used in the response with numbered annotations."

DIAGRAM_PROMPT = """You are an expert assistant specialized for visual learners.
1. Start with a brief explanation of the topic.
2. Then, provide a structured Mermaid.js diagram.
3. Wrap the diagram in triple backticks with 'mermaid' keyword.
Only output the explanation and diagram."""
