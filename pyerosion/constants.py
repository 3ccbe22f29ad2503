"""
Default parameters and numerical constants for PyErosion.

This module centralises the values shared by the height field, the particle
spawners and the erosion engine: world geometry defaults, the numerical
thresholds used by the culling rules, and the default physical parameters a
fresh ErosionParams starts from.

Values here are read-only defaults. Every engine copies what it needs into its
own ErosionParams at construction time, so changing a parameter on one engine
never affects another. The thresholds and geometry offsets are read by the
Taichi kernels at compile time.

Constant Categories:
- World Constants: Default simulation area, cell size and model placement
- Spawner Constants: Placement of the box spawner and initial velocity noise
- Threshold Constants: Near-zero tests used for culling
- Physical Defaults: Initial values of every hot-swappable engine parameter
- Monitoring Constants: Statistics smoothing

Usage:
    import pyerosion.constants as cte

    cells_per_edge = cte.WORLD_W / cte.CELL_SIZE
    params = pyerosion.erosion.ErosionParams(fluid_density = cte.FLUID_DENSITY)
"""

#########################################
###### WORLD CONSTANTS ##################
#########################################

# Default simulation rectangle in world units (origin and extent)
WORLD_X = 0.
WORLD_Y = 0.
WORLD_W = 5.
WORLD_H = 5.

# Edge length of a height field cell in world units
# 1/64 gives a 320 x 320 grid over the default world
CELL_SIZE = 1. / 64.

# Centre of the procedural height models, in world coordinates
# The models are authored for the default 5 x 5 world
MODEL_CX = 2.
MODEL_CY = 2.


#########################################
###### SPAWNER CONSTANTS ################
#########################################

# Lower-left corner of the box spawner, relative to the world origin
BOX_SPAWN_OFFSET = 1.5

# Edge length of the box spawner
BOX_SPAWN_SIZE = 1.

# Nominal spawn height. Particles are snapped to the surface on their first tick
SPAWN_HEIGHT = 1.

# Standard deviation of the horizontal noise added to the initial velocity
SPAWN_VELOCITY_STD = 5e-2


#########################################
###### THRESHOLD CONSTANTS ##############
#########################################

# Cells at or below this height are treated as bare ground: the cell is zeroed
# and the particle standing on it is culled
HEIGHT_EPS = 1e-6

# Particles on a gradient weaker than this cannot move and are culled
GRADIENT_EPS = 1e-8

# Scale of the random height loss applied when mass transfer is disabled
FALLBACK_EROSION_SCALE = 1e-2

# Particles are drawn this many cell sizes above the surface
PARTICLE_RENDER_OFFSET = 1e-1


#########################################
###### PHYSICAL DEFAULTS ################
#########################################

# Number of particles spawned per step
PARTICLES_PER_STEP = 64

# Upper bound of the uniform spawn volume
MAX_PARTICLE_VOLUME = 5.

# Fluid density, pure water (kg/m^3). Mass = volume * density
FLUID_DENSITY = 1000.

# Velocity damping per unit time
SURFACE_FRICTION = 0.01

# Scale of the Gaussian velocity noise applied every step
SURFACE_ROUGHNESS = 0.05

# Rate at which carried sediment settles when over capacity
DEPOSITION_RATE = 0.1

# Rate at which terrain dissolves when under capacity
DISSOLUTION_RATE = 0.5

# Fraction of volume lost per unit time
EVAPORATION_RATE = 0.001

# Particles with less volume than this are culled
MIN_PARTICLE_VOLUME = 0.01


#########################################
###### MONITORING CONSTANTS #############
#########################################

# Weight of the previous value in the step time moving average
STATS_SMOOTHING = 0.95

# Number of particle slots allocated when a pool is created; the arena doubles when full
POOL_INIT_CAPACITY = 1024
