import math

import pygame

from speedcam_sim.config import CameraConfig, SimulationConfig
from speedcam_sim.model.scenario import build_world

WIDTH, HEIGHT = 800, 600
BG_COLOR = (30, 30, 30)
ROAD_COLOR = (100, 100, 100)
ZONE_COLOR = (255, 0, 0)
CAR_COLOR = (0, 200, 200)
LIMITED_CAR_COLOR = (200, 200, 0)

CENTER = (WIDTH // 2, HEIGHT // 2)
RADIUS = 230
ROAD_WIDTH = 24

SIM_STEPS_PER_FRAME = 2


def ring_point(x: float, lane_length: float, radius: float = RADIUS):
    angle = 2.0 * math.pi * x / lane_length - math.pi / 2.0
    return (
        CENTER[0] + radius * math.cos(angle),
        CENTER[1] + radius * math.sin(angle),
    )


def draw_road(screen, world):
    pygame.draw.circle(screen, ROAD_COLOR, CENTER, RADIUS, ROAD_WIDTH)
    length = world.road.lane_length
    for cam in world.road.cameras:
        steps = max(2, int(cam.length / length * 120))
        points = [
            ring_point(cam.entry_position + cam.length * k / steps, length, RADIUS + ROAD_WIDTH // 2 + 4)
            for k in range(steps + 1)
        ]
        pygame.draw.lines(screen, ZONE_COLOR, False, points, 4)


def draw_cars(screen, world):
    length = world.road.lane_length
    for car in world.cars():
        color = LIMITED_CAR_COLOR if car.max_speed != car.own_max_speed else CAR_COLOR
        x, y = ring_point(car.position, length, RADIUS - ROAD_WIDTH // 2)
        pygame.draw.circle(screen, color, (int(x), int(y)), 5)


def main():
    cfg = SimulationConfig(
        dt=0.05,
        lane_length=800.0,
        num_cars=20,
        behavior_spread=0.3,
        cameras=[CameraConfig(position=600.0, speed_limit=6.0, length=150.0)],
    )
    world = build_world(cfg)

    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption("Ring road with a speed camera zone")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont(None, 24)

    running = True
    while running:
        clock.tick(60)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

        for _ in range(SIM_STEPS_PER_FRAME):
            world.step(cfg.dt)

        screen.fill(BG_COLOR)
        draw_road(screen, world)
        draw_cars(screen, world)
        label = font.render(
            f"t = {world.time:6.1f} s   violations: {world.violations.count()}",
            True, (220, 220, 220),
        )
        screen.blit(label, (10, 10))

        pygame.display.flip()

    pygame.quit()


if __name__ == "__main__":
    main()
