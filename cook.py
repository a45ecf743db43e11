#!/usr/bin/env python3
"""Ad hoc runner for the Pantry Chef generation pipeline.

Runs the workflows directly against the Gemini API and renders the result
in the terminal.

Usage:
    python cook.py chicken rice garlic
    python cook.py --image images/fridge.jpg
    python cook.py --image images/fridge.jpg tomato  # photo plus extra ingredients
    python cook.py --json chicken rice  # print the final state as JSON

Features:
- Ingredient identification from a photo (merged with typed ingredients)
- Recipe generation with one generated photo per recipe
- Loading phases printed as the pipeline progresses
- JSON mode dumps the AppState snapshot (images as data: URIs)
"""

import asyncio
import sys

from rich.console import Console

from pantry_chef.pipeline.orchestrator import GenerationOrchestrator
from pantry_chef.services.gemini import GeminiGenerationService
from pantry_chef.ui.console import ConsoleView
from pantry_chef.utils.logger import logger

console = Console()


async def cook(ingredients: list[str], image_path: str = None, as_json: bool = False) -> int:
    """Run identification (optional) and generation, then print the final state.

    Returns:
        Process exit code: 0 on success, 1 if a workflow reported an error.
    """
    orchestrator = GenerationOrchestrator(GeminiGenerationService())
    view = ConsoleView(console)
    if not as_json:
        view.attach(orchestrator)

    for name in ingredients:
        orchestrator.add_ingredient(name)

    if image_path:
        logger.info(f"Loading image: {image_path}")
        await orchestrator.upload_image(image_path)

    if orchestrator.state.error is None:
        await orchestrator.generate()

    state = orchestrator.state
    if as_json:
        console.print_json(state.model_dump_json(by_alias=True))
    else:
        view.show(state)
        if state.history:
            view.show_entry(state.history[0])
    return 1 if state.error else 0


def main(argv: list[str]) -> int:
    as_json = False
    image_path = None
    args = list(argv)

    while args and args[0].startswith("--"):
        flag = args.pop(0)
        if flag == "--json":
            as_json = True
        elif flag == "--image":
            if not args:
                print("Error: --image flag requires a file path")
                return 1
            image_path = args.pop(0)
        else:
            print(f"Unknown flag: {flag}")
            return 1

    if not args and not image_path:
        print("Usage: python cook.py [--json] [--image PATH] <ingredient> [<ingredient> ...]")
        return 1

    try:
        return asyncio.run(cook(args, image_path=image_path, as_json=as_json))
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
        return 0
    except ValueError as e:
        # Configuration errors (e.g. missing GEMINI_API_KEY)
        logger.error(f"Configuration error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
