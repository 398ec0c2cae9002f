from depmap.renderer.mermaid import WAVE_COLORS, render_dependency_mermaid, wave_color

__all__ = ["WAVE_COLORS", "render_dependency_mermaid", "wave_color"]
