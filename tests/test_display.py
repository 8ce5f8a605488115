"""Tests for display operations (DXYN)."""

import jax.numpy as jnp
import pytest
from chip8vm import execute, OutOfBoundsError
from chip8vm.instructions.display import draw_sprite
from conftest import setup_sprite_in_memory


class TestBasicSprites:
    """Test basic sprite drawing."""

    def test_basic_sprite_draw(self, fresh_state):
        """Test basic sprite drawing without collision."""
        state = fresh_state

        # Simple 2x2 box sprite
        sprite = [0xC0, 0xC0]  # 11000000, 11000000
        state = setup_sprite_in_memory(state, 0x300, sprite)

        # Set coordinates: V0=10, V1=5
        state = execute(state, 0x600A)  # V0 = 10
        state = execute(state, 0x6105)  # V1 = 5
        state = execute(state, 0xA300)  # I = 0x300

        # Draw sprite: D012 (draw at V0,V1 with height 2)
        state = execute(state, 0xD012)

        # Check pixels are drawn
        assert state.display[10, 5] == 1  # Top-left
        assert state.display[11, 5] == 1  # Top-right
        assert state.display[10, 6] == 1  # Bottom-left
        assert state.display[11, 6] == 1  # Bottom-right
        assert state.display[12, 5] == 0  # Outside sprite
        assert jnp.sum(state.display) == 4

        # No collision should occur
        assert state.V[15] == 0

    def test_collision_detection(self, fresh_state):
        """Test collision flag when sprite overlaps existing pixels."""
        state = fresh_state

        # Single pixel sprite
        sprite = [0x80]  # 10000000
        state = setup_sprite_in_memory(state, 0x400, sprite)

        state = execute(state, 0x6014)  # V0 = 20
        state = execute(state, 0x610A)  # V1 = 10
        state = execute(state, 0xA400)  # I = 0x400

        # Draw first time - no collision
        state = execute(state, 0xD011)  # Draw height 1
        assert state.display[20, 10] == 1
        assert state.V[15] == 0  # No collision

        # Draw again at same location - should collision
        state = execute(state, 0xD011)  # Draw again
        assert state.display[20, 10] == 0  # Pixel erased by XOR
        assert state.V[15] == 1  # Collision detected!

    def test_draw_twice_restores_display(self, fresh_state):
        """XOR-drawing the same sprite twice leaves the screen blank."""
        state = setup_sprite_in_memory(fresh_state, 0x500, [0xFF, 0x81, 0xFF])
        state = execute(state, 0x6008)  # V0 = 8
        state = execute(state, 0x610F)  # V1 = 15
        state = execute(state, 0xA500)  # I = 0x500

        state = execute(state, 0xD013)
        assert state.V[15] == 0

        state = execute(state, 0xD013)
        assert jnp.sum(state.display) == 0
        assert state.V[15] == 1

    def test_collision_in_any_row(self, fresh_state):
        """A single erased pixel in the last row sets VF for the whole sprite."""
        state = fresh_state.replace(display=fresh_state.display.at[3, 2].set(True))
        state = setup_sprite_in_memory(state, 0x500, [0x00, 0x00, 0x10])
        state = execute(state, 0xA500)  # I = 0x500, V0 = V1 = 0

        state = execute(state, 0xD013)

        assert state.display[3, 2] == 0
        assert state.V[15] == 1

    def test_zero_height_sprite(self, fresh_state):
        """DXY0 draws nothing and clears VF."""
        state = execute(fresh_state, 0x6F01)
        state = execute(state, 0xD010)

        assert jnp.sum(state.display) == 0
        assert state.V[15] == 0


class TestScreenBoundaries:
    """Test sprite clipping at the screen edges."""

    def test_right_edge_clips(self, fresh_state):
        """8x1 sprite at x=60 lights columns 60-63 and never wraps."""
        state = setup_sprite_in_memory(fresh_state, 0x600, [0xFF])

        state = execute(state, 0x603C)  # V0 = 60
        state = execute(state, 0x6100)  # V1 = 0
        state = execute(state, 0xA600)  # I = 0x600

        state = execute(state, 0xD011)

        for column in range(60, 64):
            assert state.display[column, 0] == 1
        for column in range(0, 4):
            assert state.display[column, 0] == 0
        assert jnp.sum(state.display) == 4
        assert state.V[15] == 0

    def test_bottom_edge_clipping(self, fresh_state):
        """Rows past the bottom edge are dropped, not wrapped."""
        state = setup_sprite_in_memory(fresh_state, 0x700, [0x80, 0x80, 0x80])

        state = execute(state, 0x6000)  # V0 = 0
        state = execute(state, 0x611E)  # V1 = 30
        state = execute(state, 0xA700)  # I = 0x700

        state = execute(state, 0xD013)  # Draw height 3

        assert state.display[0, 30] == 1
        assert state.display[0, 31] == 1
        assert state.display[0, 0] == 0
        assert jnp.sum(state.display) == 2

    def test_start_past_right_edge_draws_nothing(self, fresh_state):
        """A start column at or past 64 is off-screen, not wrapped."""
        state = setup_sprite_in_memory(fresh_state, 0x800, [0xFF])

        state = execute(state, 0x6046)  # V0 = 70
        state = execute(state, 0x6100)  # V1 = 0
        state = execute(state, 0x6F01)  # VF = 1
        state = execute(state, 0xA800)  # I = 0x800

        state = execute(state, 0xD011)

        assert jnp.sum(state.display) == 0
        assert state.V[15] == 0

    def test_start_past_bottom_edge_draws_nothing(self, fresh_state):
        """A start row at or past 32 is off-screen, not wrapped."""
        state = setup_sprite_in_memory(fresh_state, 0x800, [0xFF])

        state = execute(state, 0x6000)  # V0 = 0
        state = execute(state, 0x6128)  # V1 = 40
        state = execute(state, 0xA800)  # I = 0x800

        state = execute(state, 0xD011)

        assert jnp.sum(state.display) == 0
        assert state.V[15] == 0


class TestSpriteMemory:
    """Sprite reads are bounds-checked."""

    def test_sprite_past_end_of_memory(self, fresh_state):
        state = execute(fresh_state, 0xAFFE)  # I = 0xFFE
        with pytest.raises(OutOfBoundsError):
            execute(state, 0xD013)

    def test_sprite_at_end_of_memory(self, fresh_state):
        state = setup_sprite_in_memory(fresh_state, 0xFFF, [0x80])
        state = execute(state, 0xAFFF)

        state = execute(state, 0xD011)

        assert state.display[0, 0] == 1

    def test_font_glyph(self, fresh_state):
        """Drawing the built-in 0 glyph."""
        state = execute(fresh_state, 0xA050)  # I = glyph 0
        state = execute(state, 0xD005)

        assert jnp.sum(state.display[0:4, 0]) == 4  # 0xF0
        assert state.display[0, 1] == 1 and state.display[3, 1] == 1  # 0x90


def test_draw_sprite_reports_erasure():
    display = jnp.zeros((64, 32), dtype=jnp.bool_)
    sprite = jnp.array([0xA0], dtype=jnp.uint8)

    display, erased = draw_sprite(display, 0, 0, sprite)
    assert not erased
    assert display[0, 0] and not display[1, 0] and display[2, 0]

    display, erased = draw_sprite(display, 1, 0, sprite)
    assert not erased
    display, erased = draw_sprite(display, 0, 0, sprite)
    assert erased
