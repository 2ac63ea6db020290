from speedcam_sim.substrate.vectors import Cartesian1D
from speedcam_sim.substrate.kinematics import Movement, State
from speedcam_sim.substrate.time_iter import ConstStep
from speedcam_sim.substrate.boundary import BoundaryKind, PlanePair


__all__ = ["Cartesian1D", "Movement", "State", "ConstStep", "BoundaryKind", "PlanePair"]
