import argparse, random, time

from config.settings import CoverSettings, IntersectionMode
from entities.obstacle import Obstacle
from entities.spatial_entity import SizeCategory
from entities.wall import Wall, WallDirection
from modules.cover import CoverDetector
from modules.scene import SceneSnapshot

_SIZES = [SizeCategory.SMALL, SizeCategory.MEDIUM, SizeCategory.MEDIUM, SizeCategory.LARGE, SizeCategory.HUGE]


def build_scene(width:int, height:int, tokens:int, walls:int, grid:float):
    obstacles = []
    for idx in range(tokens):
        x = (random.randint(0, width-1) + 0.5) * grid
        y = (random.randint(0, height-1) + 0.5) * grid
        obstacles.append(Obstacle(f't{idx}', x, y, size=random.choice(_SIZES),
                                  elevation=random.choice([0.0, 0.0, 0.0, 5.0, 10.0])))
    segments = []
    for idx in range(walls):
        x1 = random.uniform(0, width*grid)
        y1 = random.uniform(0, height*grid)
        # Short axis-aligned segments, the way interior walls are usually drawn
        if random.random() < 0.5:
            x2, y2 = x1 + random.uniform(1, 4)*grid, y1
        else:
            x2, y2 = x1, y1 + random.uniform(1, 4)*grid
        direction = random.choice([WallDirection.BOTH, WallDirection.BOTH, WallDirection.LEFT])
        segments.append(Wall(x1, y1, x2, y2, direction=direction, wall_id=f'w{idx}'))
    return SceneSnapshot(tuple(obstacles), tuple(segments), grid)


def random_pairs(scene:SceneSnapshot, count:int):
    pairs = []
    obstacles = list(scene.obstacles)
    for _ in range(count):
        a, b = random.sample(obstacles, 2)
        pairs.append((a, b))
    return pairs


def run_benchmark(width:int, height:int, tokens:int, walls:int, samples:int, seed:int, grid:float=50.0):
    random.seed(seed)
    scene = build_scene(width, height, tokens, walls, grid)
    pairs = random_pairs(scene, samples)
    results = {}
    for mode in IntersectionMode:
        detector = CoverDetector(scene, CoverSettings(intersection_mode=mode))
        counts = {}
        t0 = time.perf_counter()
        for a, b in pairs:
            level = detector.detect_between_tokens(a, b)
            counts[level.label] = counts.get(level.label, 0) + 1
        t1 = time.perf_counter()
        results[mode.value] = {
            'time_s': t1 - t0,
            'per_pair_ms': (t1 - t0) * 1000 / max(1, samples),
            'levels': counts,
        }
    return results


def main():
    ap = argparse.ArgumentParser(description='Cover Benchmark: every intersection mode on a random scene')
    ap.add_argument('--width', type=int, default=30, help='scene width in squares')
    ap.add_argument('--height', type=int, default=30, help='scene height in squares')
    ap.add_argument('--tokens', type=int, default=40)
    ap.add_argument('--walls', type=int, default=25)
    ap.add_argument('--samples', type=int, default=500)
    ap.add_argument('--seed', type=int, default=1337)
    args = ap.parse_args()
    if args.tokens < 2:
        ap.error('--tokens must be at least 2')
    result = run_benchmark(args.width, args.height, args.tokens, args.walls, args.samples, args.seed)
    print('\n=== Cover Benchmark ===')
    for mode, stats in result.items():
        print(f"{mode:>20}: {stats['time_s']:.4f}s total, {stats['per_pair_ms']:.3f} ms/pair, levels={stats['levels']}")

if __name__ == '__main__':
    main()
