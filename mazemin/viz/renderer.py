import pygame

from mazemin.algo.base import StepDriver, StepState
from mazemin.core.grid import Grid

# Speed level -> delay between steps (ms)
SPEEDS = {1: 140, 2: 90, 3: 55, 4: 30, 5: 10}
DEFAULT_SPEED = 3


class Renderer:
    COLOR_BG = (10, 10, 10)
    COLOR_WALL = (200, 200, 200)
    COLOR_HEAT_COLD = (30, 50, 110)
    COLOR_HEAT_HOT = (90, 170, 230)
    COLOR_SOLVER_VISITED = (100, 150, 200)
    COLOR_SOLUTION = (255, 215, 0)  # Gold
    COLOR_HINT = (240, 90, 60)
    COLOR_ACTIVE = (255, 255, 255)
    COLOR_FRONTIER = (250, 160, 40)
    COLOR_START = (60, 200, 90)
    COLOR_GOAL = (220, 60, 80)

    def __init__(self, grid: Grid, generator=None, solver=None, width=960, height=720,
                 speed: int = DEFAULT_SPEED):
        if speed not in SPEEDS:
            raise ValueError(f"Speed must be one of {sorted(SPEEDS)}, got {speed}")
        self.grid = grid
        self.generator = generator
        self.solver = solver
        self.screen_width = width
        self.screen_height = height
        self.speed = speed

        self.cell_size = 20.0
        self.offset_x = 0.0
        self.offset_y = 0.0

        self.font = None
        self.running = True
        self.clock = None
        self.surface = None
        self.status = ""

    @property
    def step_delay(self) -> int:
        return SPEEDS[self.speed]

    def fit_to(self, width: int, height: int):
        """Zoom and centre so the whole grid fits with padding."""
        padding = 20
        available_w = max(1, width - padding * 2)
        available_h = max(1, height - padding * 2)
        self.cell_size = min(available_w / self.grid.width, available_h / self.grid.height)

        self.offset_x = (width - self.grid.width * self.cell_size) / 2
        self.offset_y = (height - self.grid.height * self.cell_size) / 2

    def init_window(self):
        pygame.init()
        pygame.display.set_caption(f"mazemin - {self.grid.width}x{self.grid.height}")
        self.surface = pygame.display.set_mode((self.screen_width, self.screen_height), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("Consolas", 16)
        self.fit_to(self.screen_width, self.screen_height)

    def cell_rect(self, x: int, y: int) -> pygame.Rect:
        px = int(x * self.cell_size + self.offset_x)
        py = int(y * self.cell_size + self.offset_y)
        size = int(self.cell_size) + 1
        return pygame.Rect(px, py, size, size)

    def heat_color(self, order: int):
        span = max(1, self.grid.max_order)
        t = min(1.0, max(0.0, order / span))
        cold, hot = self.COLOR_HEAT_COLD, self.COLOR_HEAT_HOT
        return tuple(int(c + (h - c) * t) for c, h in zip(cold, hot))

    def hint_cells(self):
        if not self.solver or not self.solver.path:
            return []
        path = self.solver.path
        return [path[step] for step in self.solver.hints if step < len(path)]

    def draw(self, surface: pygame.Surface = None):
        """Draws the current grid state. Works on any Surface, window or not."""
        surface = surface or self.surface
        grid = self.grid
        surface.fill(self.COLOR_BG)

        # Pass 1: backgrounds
        for y in range(grid.height):
            for x in range(grid.width):
                idx = y * grid.width + x
                cell = grid.cells[idx]
                rect = self.cell_rect(x, y)
                if cell & Grid.SOLVER_VISITED:
                    pygame.draw.rect(surface, self.COLOR_SOLVER_VISITED, rect)
                elif cell & Grid.VISITED:
                    pygame.draw.rect(surface, self.heat_color(grid.order[idx]), rect)

        if self.solver and self.solver.path:
            for px, py in self.solver.path:
                pygame.draw.rect(surface, self.COLOR_SOLUTION, self.cell_rect(px, py))
        for hx, hy in self.hint_cells():
            pygame.draw.rect(surface, self.COLOR_HINT, self.cell_rect(hx, hy))

        pygame.draw.rect(surface, self.COLOR_START, self.cell_rect(*grid.start))
        pygame.draw.rect(surface, self.COLOR_GOAL, self.cell_rect(*grid.goal))

        if self.generator is not None:
            for fx, fy in self.generator.frontier:
                pygame.draw.rect(surface, self.COLOR_FRONTIER, self.cell_rect(fx, fy), 1)
        for source in (self.generator, self.solver):
            if source is not None and source.active is not None:
                pygame.draw.rect(surface, self.COLOR_ACTIVE, self.cell_rect(*source.active), 2)

        # Pass 2: walls
        if self.cell_size > 4.0:
            for y in range(grid.height):
                for x in range(grid.width):
                    cell = grid.cells[y * grid.width + x]
                    rect = self.cell_rect(x, y)
                    left, top = rect.left, rect.top
                    right, bottom = rect.left + rect.width, rect.top + rect.height
                    if cell & Grid.SOUTH:
                        pygame.draw.line(surface, self.COLOR_WALL, (left, bottom), (right, bottom), 1)
                    if cell & Grid.EAST:
                        pygame.draw.line(surface, self.COLOR_WALL, (right, top), (right, bottom), 1)
                    if y == 0 and (cell & Grid.NORTH):
                        pygame.draw.line(surface, self.COLOR_WALL, (left, top), (right, top), 1)
                    if x == 0 and (cell & Grid.WEST):
                        pygame.draw.line(surface, self.COLOR_WALL, (left, top), (left, bottom), 1)

    def draw_hud(self):
        info = [
            f"Size: {self.grid.width}x{self.grid.height}",
            f"Speed: {self.speed} ({self.step_delay} ms)",
            f"Status: {self.status}",
        ]
        for i, text in enumerate(info):
            lbl = self.font.render(text, True, (255, 255, 255))
            self.surface.blit(lbl, (10, 10 + i * 20))

    def handle_input(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.VIDEORESIZE:
                self.screen_width, self.screen_height = event.w, event.h
                self.fit_to(event.w, event.h)
            elif event.type == pygame.KEYDOWN:
                # 1..5 change speed, Esc quits
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif pygame.K_1 <= event.key <= pygame.K_5:
                    self.speed = event.key - pygame.K_0

    def run_loop(self):
        """Animates generation, then solving, one step per speed tick."""
        drivers = []
        if self.generator is not None:
            drivers.append(self.generator.driver())
        if self.solver is not None:
            drivers.append(self.solver.driver())

        driver: StepDriver = drivers.pop(0) if drivers else None
        elapsed = 0
        try:
            while self.running:
                self.handle_input()

                elapsed += self.clock.tick(60)
                while driver is not None and elapsed >= self.step_delay:
                    elapsed -= self.step_delay
                    if driver.step() is StepState.DONE:
                        driver = drivers.pop(0) if drivers else None
                    else:
                        self.status = driver.status
                if driver is None:
                    elapsed = 0
                    self.status = "Done"

                self.draw()
                self.draw_hud()
                pygame.display.flip()
        finally:
            pygame.quit()
