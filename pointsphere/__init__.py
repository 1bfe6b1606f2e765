"""
Point Sphere
============

An interactive point-cloud sphere that reacts to the pointer.

Points sit on a Fibonacci lattice over the sphere surface.  Each frame:

  - The pointer is cast onto the sphere (ray/sphere intersection)
  - Points inside the cursor's exclusion zone snap to its boundary
  - Fast swipes kick points outward with a sine-eased animation
  - Released points hold briefly, then drift back home
  - Two travelling radial waves morph the whole sphere
  - Every point blinks between two colours on its own phase

The simulation core (field, pointer, interaction, morph, engine) is pure
numpy and runs headless; the PyQt5 host only draws and feeds it input.
"""

__version__ = "1.0.0"
__author__ = "Point Sphere"
