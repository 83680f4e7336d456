"""Built-in model catalogue for the Groq OpenAI-compatible endpoint."""

from .models import ModelCategory, ModelConfig, ModelSpecs

DEFAULT_MODELS: tuple[ModelConfig, ...] = (
    ModelConfig(
        id="llama-3.3-70b-versatile",
        name="Llama 3.3 70B",
        description="Large-context foundation model with strong general versatility.",
        category=ModelCategory.FOUNDATION,
        badge="Featured",
        specs=ModelSpecs(
            parameters="70 Billion",
            context_window="128K",
            latency="Medium",
            throughput="Medium",
        ),
        recommended=("General-purpose tasks", "Complex reasoning", "Creative content"),
        use_cases=("General-purpose tasks", "Complex reasoning", "Creative content"),
    ),
    ModelConfig(
        id="gemma2-9b-it",
        name="Gemma 2 9B",
        description="Lightweight model tuned for efficiency and fast responses.",
        category=ModelCategory.FOUNDATION,
        specs=ModelSpecs(
            parameters="9 Billion",
            context_window="32K",
            latency="Very low",
            throughput="High",
        ),
        recommended=("Quick responses", "Mobile applications", "Resource-constrained environments"),
        use_cases=("Quick responses", "Mobile applications", "Efficiency"),
    ),
    ModelConfig(
        id="mixtral-8x7b",
        name="Mixtral 8x7B",
        description="Mixture-of-experts model balancing quality and resource use.",
        category=ModelCategory.FOUNDATION,
        specs=ModelSpecs(
            parameters="8x7B MoE",
            context_window="32K",
            latency="Medium",
            throughput="Medium-High",
        ),
        recommended=("Balanced performance and efficiency", "Multi-domain tasks", "Content generation"),
        use_cases=("Multi-domain tasks", "Balanced performance", "Content generation"),
    ),
    ModelConfig(
        id="llama-3.1-8b-instant",
        name="Llama 3.1 8B",
        description="Small model for real-time interaction.",
        category=ModelCategory.FOUNDATION,
        badge="Fast",
        specs=ModelSpecs(
            parameters="8 Billion",
            context_window="8K",
            latency="Very low",
            throughput="Very high",
        ),
        recommended=("Real-time applications", "Chat interfaces", "Quick responses"),
        use_cases=("Chat applications", "Real-time responses", "Mobile devices"),
    ),
    ModelConfig(
        id="qwen-qwq-32b",
        name="Qwen QWQ 32B",
        description="Reasoning model with strong logical and analytical ability.",
        category=ModelCategory.REASONING,
        reasoning_capable=True,
        specs=ModelSpecs(
            parameters="32 Billion",
            context_window="32K",
            latency="Medium-High",
            throughput="Medium",
        ),
        recommended=("Complex problem solving", "Mathematical reasoning", "Step-by-step explanations"),
        use_cases=("Complex problem solving", "Mathematical reasoning", "Step-by-step explanations"),
    ),
    ModelConfig(
        id="deepseek-r1-distill-qwen-32b",
        name="DeepSeek R1 (Qwen 32B)",
        description="Distilled reasoning model for knowledge-heavy questions.",
        category=ModelCategory.REASONING,
        reasoning_capable=True,
        specs=ModelSpecs(
            parameters="32 Billion",
            context_window="64K",
            latency="Medium-High",
            throughput="Medium",
        ),
        recommended=("Research assistance", "Knowledge-intensive tasks", "Complex explanations"),
        use_cases=("Research assistance", "Knowledge-intensive tasks", "Complex explanations"),
    ),
    ModelConfig(
        id="deepseek-r1-distill-llama-70b",
        name="DeepSeek R1 (Llama 70B)",
        description="High-capacity reasoning model for deep multi-step tasks.",
        category=ModelCategory.REASONING,
        reasoning_capable=True,
        specs=ModelSpecs(
            parameters="70 Billion",
            context_window="128K",
            latency="High",
            throughput="Low-Medium",
        ),
        recommended=("Advanced reasoning", "Step-by-step solutions", "Scientific domains"),
        use_cases=("Advanced reasoning", "Step-by-step solutions", "Scientific domains"),
    ),
)
