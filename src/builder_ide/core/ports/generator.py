from typing import Protocol


class CodeGenerator(Protocol):
    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 2000,
    ) -> str: ...
