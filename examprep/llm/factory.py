"""LLM Client Factory - Opcoes do Claude Agent SDK para avaliador e gerador."""

from claude_agent_sdk import ClaudeAgentOptions

from ..config import get_config
from ..prompts import GENERATOR_SYSTEM_PROMPT, GRADER_SYSTEM_PROMPT


class LLMClientFactory:
    """Factory de ClaudeAgentOptions.

    Centraliza a configuracao dos agentes usados pelo motor:
    - avaliador de respostas abertas (modelo rapido por padrao)
    - gerador de questoes (modelo de melhor qualidade por padrao)

    Nenhum dos dois usa ferramentas: a resposta esperada e apenas JSON.

    Example:
        >>> factory = LLMClientFactory()
        >>> options = factory.grader_options()
        >>> async for message in query(prompt=prompt, options=options): ...
    """

    def __init__(self, grader_model: str | None = None, generator_model: str | None = None):
        config = get_config()
        self.grader_model = grader_model or config.grader_model
        self.generator_model = generator_model or config.generator_model

    @staticmethod
    def create_options(model: str, system_prompt: str) -> ClaudeAgentOptions:
        """Cria opcoes de agente sem ferramentas, com um unico turno."""
        return ClaudeAgentOptions(
            model=model,
            system_prompt=system_prompt,
            allowed_tools=[],
            max_turns=1,
        )

    def grader_options(self) -> ClaudeAgentOptions:
        return self.create_options(self.grader_model, GRADER_SYSTEM_PROMPT)

    def generator_options(self) -> ClaudeAgentOptions:
        return self.create_options(self.generator_model, GENERATOR_SYSTEM_PROMPT)
