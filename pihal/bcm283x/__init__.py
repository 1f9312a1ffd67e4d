"""BCM283x SoC family: register map, configuration and board variants.

Board variants are registered by pihal.bcm283x.boards, which the top-level
package imports.
"""
