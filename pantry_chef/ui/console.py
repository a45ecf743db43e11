"""Terminal front end rendering orchestrator snapshots with rich.

render_state() is a pure function of AppState; ConsoleView subscribes to an
orchestrator and prints progress as the workflows move between phases.
"""

from typing import Callable, List, Optional

from rich.console import Console, Group, RenderableType
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pantry_chef.models.models import AppState, HistoryEntry, LoadingPhase, Recipe


def render_ingredients(ingredients) -> RenderableType:
    if not ingredients:
        return Text("No ingredients yet.", style="dim")
    text = Text("Ingredients: ", style="bold")
    text.append(", ".join(ingredients), style="green")
    return text


def render_recipe(recipe: Recipe, index: int) -> RenderableType:
    lines = [f"_{recipe.description}_", ""] if recipe.description else []
    lines.append("**Ingredients**")
    lines.extend(f"- {item}" for item in recipe.ingredients)
    lines.extend(["", "**Instructions**"])
    lines.extend(f"{step_number}. {step}" for step_number, step in enumerate(recipe.instructions, start=1))

    subtitle = "📷 photo generated" if recipe.has_image else "no photo"
    return Panel(
        Markdown("\n".join(lines)),
        title=f"[bold]{index}. {recipe.name}[/bold]",
        subtitle=subtitle,
        border_style="cyan",
    )


def render_history(history) -> RenderableType:
    if not history:
        return Panel(
            Text("No history yet.\nGenerate some recipes to see them here!", justify="center"),
            title="Recipe History",
        )
    table = Table(title="Recipe History", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("When")
    table.add_column("Ingredients")
    table.add_column("Recipes", justify="right")
    for position, entry in enumerate(history, start=1):
        local = entry.timestamp.astimezone()
        table.add_row(
            str(position),
            f"{local:%Y-%m-%d} - {local:%H:%M:%S}",
            ", ".join(entry.ingredients),
            str(len(entry.recipes)),
        )
    return table


def render_state(state: AppState) -> RenderableType:
    """Build the full screen for one snapshot."""
    parts: List[RenderableType] = [render_ingredients(state.ingredients)]

    if state.is_history_visible:
        parts.append(render_history(state.history))

    if state.is_loading:
        parts.append(Text(f"⏳ {state.loading_message}", style="yellow"))
    if state.error:
        parts.append(Panel(Text(state.error), title="Oops!", border_style="red"))
    if not state.is_loading:
        parts.extend(render_recipe(recipe, index) for index, recipe in enumerate(state.recipes, start=1))
    if state.show_empty_prompt:
        parts.append(
            Text(
                "Your culinary adventure awaits!\nAdd some ingredients and let's get cooking.",
                style="dim",
                justify="center",
            )
        )
    return Group(*parts)


class ConsoleView:
    """Prints loading phases as they change and the final screen on demand.

    Args:
        console: rich Console to print to (a new one by default).
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()
        self._last_phase: Optional[LoadingPhase] = None

    def attach(self, orchestrator) -> Callable[[], None]:
        """Subscribe to orchestrator; returns the unsubscribe function."""
        return orchestrator.subscribe(self.on_state)

    def on_state(self, state: AppState) -> None:
        if state.loading_phase is not None and state.loading_phase != self._last_phase:
            self.console.print(Text(f"⏳ {state.loading_message}", style="yellow"))
        self._last_phase = state.loading_phase

    def show(self, state: AppState) -> None:
        self.console.print(render_state(state))

    def show_entry(self, entry: HistoryEntry) -> None:
        self.console.print(Text(entry.summary(), style="bold magenta"))
