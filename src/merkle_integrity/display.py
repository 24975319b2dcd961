# display.py
# All terminal output for the Merkle integrity demo and benchmark.
#
# This module owns presentation entirely. merkle.py and bench.py never print;
# the entry points call named functions here. Swap this file to change the UI.
#
# Colour language:
#   cyan: phases / routing events
#   yellow: digests and tree structure
#   green: intact / success
#   red: tampered, errors, halts
#   magenta: tamper simulation

import logging

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from merkle_integrity.merkle import InternalNode, LeafNode, MerkleTree, Node, VerifyResult
from merkle_integrity.models import BenchRow

console = Console()


def setup_logging(level: str = "WARNING") -> None:
    """Route library logging through rich on the shared console."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _label(tag: str, color: str) -> Text:
    t = Text()
    t.append(f" {tag} ", style=f"bold white on {color}")
    return t


def _short(digest_hex: str) -> str:
    return f"{digest_hex[:16]}…{digest_hex[-8:]}"


def _node_label(node: Node) -> str:
    if isinstance(node, LeafNode):
        return f"[white]{node.name}[/white]  [dim yellow]{_short(node.hex)}[/dim yellow]"
    if node.right is None:
        return f"[yellow]{_short(node.hex)}[/yellow] [dim](promoted)[/dim]"
    return f"[yellow]{_short(node.hex)}[/yellow]"


# ---------------------------------------------------------------------------
# Demo entry
# ---------------------------------------------------------------------------


def banner(title: str, subtitle: str) -> None:
    console.print()
    console.print(
        Panel.fit(
            f"[bold cyan]{title}[/bold cyan]\n[dim]{subtitle}[/dim]",
            border_style="cyan",
            padding=(1, 4),
        )
    )


# ---------------------------------------------------------------------------
# Merkle tree
# ---------------------------------------------------------------------------


def merkle_committed(tree: MerkleTree) -> None:
    console.print()

    leaf_table = Table(box=box.SIMPLE, show_header=True, header_style="bold yellow", padding=(0, 1))
    leaf_table.add_column("#", justify="center", width=4)
    leaf_table.add_column("Record", style="white")
    leaf_table.add_column("Leaf Hash (SHA-256)", style="yellow")

    for i, leaf in enumerate(tree.leaves):
        leaf_table.add_row(str(i), leaf.name, leaf.hex)

    console.print(
        Panel(
            f"[bold yellow]Merkle Root:[/bold yellow] [white]{tree.root_hex}[/white]\n"
            f"[dim]{tree.leaf_count} leaves, {tree.depth} internal level(s)[/dim]",
            title=_label("MERKLE TREE BUILT", "yellow"),
            border_style="yellow",
            padding=(0, 2),
        )
    )
    console.print(leaf_table)


def tree_levels(tree: MerkleTree) -> None:
    """Render the tree top-down, the way it was paired."""
    if tree.root is None:
        return

    def _attach(branch: Tree, node: Node) -> None:
        child = branch.add(_node_label(node))
        if isinstance(node, InternalNode):
            _attach(child, node.left)
            if node.right is not None:
                _attach(child, node.right)

    graph = Tree(f"[bold green]Root {_short(tree.root.hex)}[/bold green]")
    if isinstance(tree.root, InternalNode):
        _attach(graph, tree.root.left)
        if tree.root.right is not None:
            _attach(graph, tree.root.right)
    else:
        graph.add(_node_label(tree.root))

    console.print()
    console.print(graph)


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------


def verify_phase(title: str) -> None:
    console.print()
    console.print(Rule(f"[cyan]{title}[/cyan]", style="cyan"))


def verify_result(name: str, result: VerifyResult) -> None:
    if result is VerifyResult.INTACT:
        console.print(f"  [bold green]✓ Intact[/bold green]    [white]{name}[/white]")
    elif result is VerifyResult.TAMPERED:
        console.print(f"  [bold red]✗ Tampered[/bold red]  [white]{name}[/white]")
    else:
        console.print(f"  [dim]? Not found[/dim] [white]{name}[/white]")


def tampering(name: str, content: str) -> None:
    console.print()
    console.print(
        Panel(
            f"Overwriting [bold white]{name}[/bold white] with [white]{content!r}[/white]\n"
            "[dim]Leaf digest left stale. The next verify recomputes it.[/dim]",
            title=_label("TAMPER SIMULATION", "magenta"),
            border_style="magenta",
            padding=(0, 2),
        )
    )


def elapsed(seconds: float) -> None:
    console.print()
    console.print(f"[dim]Time taken: {seconds:.6f} seconds[/dim]")


# ---------------------------------------------------------------------------
# Benchmark
# ---------------------------------------------------------------------------


def bench_summary(rows: list[BenchRow]) -> None:
    console.print()
    table = Table(
        box=box.SIMPLE_HEAVY,
        border_style="dim",
        show_header=True,
        header_style="bold cyan",
        padding=(0, 1),
    )
    table.add_column("Run", justify="center", width=5)
    table.add_column("N", justify="right", width=8)
    table.add_column("Op", width=22)
    table.add_column("Time (ms)", justify="right", width=12)
    table.add_column("Peak mem", justify="right", width=10)
    table.add_column("Result", justify="center", width=10)
    table.add_column("Details", style="dim white")

    for row in rows:
        color = {"ok": "green", "tampered": "red"}.get(row.result, "yellow")
        table.add_row(
            str(row.run_id),
            str(row.n),
            row.op,
            f"{row.op_time_ms:.3f}",
            str(row.memory_bytes),
            f"[{color}]{row.result}[/{color}]",
            row.details if len(row.details) <= 24 else _short(row.details),
        )

    console.print(
        Panel(
            table,
            title="[dim]BENCHMARK RESULTS[/dim]",
            border_style="dim",
            padding=(0, 1),
        )
    )


def results_written(path: str) -> None:
    console.print(f"[green]Results written to[/green] [white]{path}[/white]")


def halt(reason: str) -> None:
    console.print()
    console.print(
        Panel(
            f"[bold white]{reason}[/bold white]",
            title=_label("HALT", "red"),
            border_style="red",
            padding=(0, 2),
        )
    )
    console.print()
