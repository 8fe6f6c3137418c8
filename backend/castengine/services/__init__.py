"""
Services package - Core business logic and integrations

Organized by domain responsibility:

Providers:
    - llm: Chat strategies, SSE delta parsing, ChatClient
    - tts: Speech strategies, language-routed SpeechClient
    - http_errors: Status/transport classification into the error taxonomy
    - retry: Exponential-backoff RetryPolicy

Pipeline:
    - pipeline: Script prompt, segmentation, progress reporting, PodcastPipeline
    - events: Sinks that receive progress and stream notifications
    - insight: Language detection and streamed six-section text analysis
    - learning_records: Query/podcast history and word frequency

Infrastructure:
    - storage: Audio cache eviction, config rows, API key storage, history rows
    - api_configs: Provider configuration CRUD and client resolution
    - connection: Provider connection test
    - registry: Shared instances handed to the routes
"""
