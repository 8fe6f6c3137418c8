"""
Script generation prompt

The instruction is composed from two independent axes: the language mode
(bilingual vs. immersive) and the pace (slow vs. normal).
"""

from typing import List

from castengine.models import Message, PodcastInput, PodcastMode, PodcastOptions, SpeedMode

MODE_INSTRUCTIONS = {
    PodcastMode.BILINGUAL: (
        "Generate a bilingual podcast script. Alternate between the original language "
        "and the target language. For each key phrase or sentence, first present it in "
        "the original language, then explain it in the target language."
    ),
    PodcastMode.IMMERSIVE: (
        "Generate an immersive podcast script entirely in the target language. Explain "
        "the content naturally as if teaching a language learner, using only the target language."
    ),
}

PACE_INSTRUCTIONS = {
    SpeedMode.SLOW: "Use short, simple sentences. Pause between ideas. Speak slowly and clearly.",
    SpeedMode.NORMAL: "Use natural conversational pace and sentence length.",
}

SYSTEM_TEMPLATE = (
    "You are a language learning podcast host. Your job is to transform the given content into "
    "an engaging spoken explanation that helps learners understand the material.\n\n"
    "Target language: {target_language}\n"
    "{mode_instruction}\n"
    "{pace_instruction}\n\n"
    "Output ONLY the podcast script text, ready to be read aloud. "
    "Use paragraph breaks to separate segments. Do not include stage directions or metadata."
)


def build_script_prompt(podcast_input: PodcastInput, options: PodcastOptions) -> List[Message]:
    """System instruction followed by the raw content as the user turn"""
    system = SYSTEM_TEMPLATE.format(
        target_language=options.target_language,
        mode_instruction=MODE_INSTRUCTIONS[options.mode],
        pace_instruction=PACE_INSTRUCTIONS[options.speed],
    )
    return [Message.system(system), Message.user(podcast_input.content)]
