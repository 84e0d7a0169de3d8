import argparse
import random
import threading
from collections import OrderedDict, namedtuple

from page_table import PAGE_SIZE, PageReference, ProcessTable
from memory_manager import InvalidInput, PhysicalMemory, Statistics

ALGORITHMS = ['FIFO', 'LRU', 'OPT']
HIT = 'HIT'
MISS = 'MISS'

Decision = namedtuple('Decision', ['outcome', 'reference', 'frame_number', 'evicted'])


def normalize_algorithm(algorithm):
    name = algorithm.upper()
    if name == 'OPTIMAL':
        name = 'OPT'
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm: {algorithm}")
    return name


class VirtualMemorySimulator:

    def __init__(self, ram_kb, keep_policy_state=False):
        num_frames = (ram_kb * 1024) // PAGE_SIZE
        if num_frames <= 0:
            raise InvalidInput(f"RAM size of {ram_kb} KB holds no {PAGE_SIZE}-byte frame")
        self.ram_kb = ram_kb
        self.physical_memory = PhysicalMemory(num_frames=num_frames)
        self.processes = ProcessTable()
        self.stats = Statistics()
        self.keep_policy_state = keep_policy_state
        self._lock = threading.Lock()
        self._reset_policy_state()

    def _reset_policy_state(self):
        self.fifo_queue = OrderedDict()  # PageReference -> None, arrival order
        self.last_access_time = {}  # PageReference -> LRU clock value
        self.current_time = 0

    @property
    def num_frames(self):
        return self.physical_memory.num_frames

    def register_process(self, name, byte_size):
        with self._lock:
            return self.processes.register(name, byte_size)

    def reference_fifo(self, process_id, page_number):
        return self.reference('FIFO', process_id, page_number)

    def reference_lru(self, process_id, page_number):
        return self.reference('LRU', process_id, page_number)

    def reference_optimal(self, process_id, page_number, future_references):
        return self.reference('OPT', process_id, page_number, future_references)

    def reference(self, algorithm, process_id, page_number, future_references=None):
        algorithm = normalize_algorithm(algorithm)
        if process_id < 0 or page_number < 0:
            raise InvalidInput(
                f"Process id and page number must be non-negative, got ({process_id}, {page_number})")
        ref = PageReference(process_id, page_number)

        with self._lock:
            if algorithm == 'LRU':
                self.current_time += 1

            frame_num = self.physical_memory.find_frame(ref)
            if frame_num is not None:
                self.stats.record_hit()
                if algorithm == 'LRU':
                    self.last_access_time[ref] = self.current_time
                return Decision(HIT, ref, frame_num, None)

            return self.handle_page_fault(algorithm, ref, future_references)

    def handle_page_fault(self, algorithm, ref, future_references):
        # Victim is chosen before anything is mutated so a rejected lookahead leaves no trace
        if self.physical_memory.is_full():
            frame_num = self.select_victim_page(algorithm, future_references)
        else:
            frame_num = self.physical_memory.find_free_frame()

        evicted = self.physical_memory.allocate_frame(frame_num, ref)
        if evicted is not None:
            self.forget(evicted)
            self.processes.set_resident(evicted, None)
        self.processes.set_resident(ref, frame_num)
        self.stats.record_page_fault(evicted)
        self.register_arrival(algorithm, ref)

        return Decision(MISS, ref, frame_num, evicted)

    def register_arrival(self, algorithm, ref):
        # Entries kept across a reset describe an earlier residency
        self.forget(ref)
        if algorithm == 'FIFO':
            self.fifo_queue[ref] = None
        elif algorithm == 'LRU':
            self.last_access_time[ref] = self.current_time

    def forget(self, ref):
        self.fifo_queue.pop(ref, None)
        self.last_access_time.pop(ref, None)

    def select_victim_page(self, algorithm, future_references=None):
        if algorithm == 'FIFO':
            return self.select_victim_fifo()
        elif algorithm == 'LRU':
            return self.select_victim_lru()
        elif algorithm == 'OPT':
            return self.select_victim_optimal(future_references)
        else:
            raise ValueError(f"Unknown algorithm: {algorithm}")

    def select_victim_fifo(self):
        # Pages loaded by another policy never entered the queue: they are the oldest
        for frame_num, ref in enumerate(self.physical_memory.frames):
            if ref not in self.fifo_queue:
                return frame_num

        for ref in list(self.fifo_queue):
            frame_num = self.physical_memory.find_frame(ref)
            if frame_num is not None:
                return frame_num
            # Left behind by a reset that kept policy state
            del self.fifo_queue[ref]
        return None

    def select_victim_lru(self):
        lru_time = float('inf')
        victim_frame = None

        for frame_num, ref in enumerate(self.physical_memory.frames):
            access_time = self.last_access_time.get(ref, 0)
            # Strict comparison keeps the lowest frame on ties
            if access_time < lru_time:
                lru_time = access_time
                victim_frame = frame_num

        return victim_frame

    def select_victim_optimal(self, future_references):
        """
        Belady's rule: evict the resident page whose next use in future_references
        (the sequence remaining after the current reference) is farthest away, a page
        never used again counting as infinitely far. Ties go to the lowest frame.
        """
        if not future_references:
            raise InvalidInput("OPT eviction needs a non-empty future reference sequence")

        next_use = {}
        for position, (process_id, page_number) in enumerate(future_references):
            next_use.setdefault(PageReference(process_id, page_number), position)

        farthest = -1
        victim_frame = None

        for frame_num, ref in enumerate(self.physical_memory.frames):
            next_ref_time = next_use.get(ref, float('inf'))
            if next_ref_time > farthest:
                farthest = next_ref_time
                victim_frame = frame_num

        return victim_frame

    def query_state(self):
        with self._lock:
            state = {
                'ram_kb': self.ram_kb,
                'frame_count': self.num_frames,
                'frames': self.physical_memory.snapshot(),
                'process_count': len(self.processes),
                'resident_count': self.physical_memory.resident_count(),
                'total_accesses': self.stats.total_accesses,
                'hit_rate': self.stats.hit_rate,
            }
            state.update(self.stats.as_dict())
            return state

    def reset(self, clear_policy_state=None):
        if clear_policy_state is None:
            clear_policy_state = not self.keep_policy_state
        with self._lock:
            self.physical_memory.clear()
            self.processes.clear_residency()
            self.stats.reset()
            if clear_policy_state:
                self._reset_policy_state()

    def run_simulation(self, trace, algorithm, verbose=False):
        algorithm = normalize_algorithm(algorithm)
        trace = [PageReference(*item) for item in trace]

        if verbose:
            print(f"\n{'='*60}")
            print(f"Running {algorithm} algorithm on {len(trace)} references "
                  f"with {self.num_frames} frames")
            print(f"{'='*60}")

        for i, ref in enumerate(trace):
            # At the last reference only the faulting page itself is left to look at
            future = (trace[i + 1:] or [ref]) if algorithm == 'OPT' else None
            decision = self.reference(algorithm, ref.process_id, ref.page_number, future)
            if verbose:
                print(format_step(i + 1, decision))

        if verbose:
            print(f"\nResults:")
            print(self.stats)
            print(f"{'='*60}\n")

        return self.stats


def format_step(step, decision):
    ref = decision.reference
    line = (f"Step {step}: {decision.outcome} - Process {ref.process_id}, "
            f"Page {ref.page_number} -> Frame {decision.frame_number}")
    if decision.evicted is not None:
        line += f" (evicted Process {decision.evicted.process_id}, Page {decision.evicted.page_number})"
    return line


def best_algorithm(results, metric, higher_is_better):
    pick = max if higher_is_better else min
    # Earlier algorithms win ties
    return pick(results, key=lambda algorithm: getattr(results[algorithm], metric))


def load_trace(filename):
    trace = []
    with open(filename, 'r') as f:
        for line in f:
            if line.lstrip().startswith('#'):
                continue
            parts = line.strip().split()
            if len(parts) != 2:
                continue
            try:
                process_id, page_number = int(parts[0]), int(parts[1])
            except ValueError:
                # Header rows such as "pid page"
                continue
            trace.append(PageReference(process_id, page_number))
    return trace


def generate_reference_string(processes, seed=None):
    rng = random.Random(seed)
    references = []

    for process in processes:
        # Sequential pass, then a few random revisits
        references.extend(process.references())
        for _ in range(min(20, process.page_count * 2)):
            references.append(PageReference(process.process_id, rng.randrange(process.page_count)))

    rng.shuffle(references)
    return references


def compare_algorithms(trace, ram_kb, algorithms=ALGORITHMS):
    results = {}
    for algorithm in algorithms:
        simulator = VirtualMemorySimulator(ram_kb)
        stats = simulator.run_simulation(trace, algorithm)
        row = stats.as_dict()
        row['hit_rate'] = stats.hit_rate
        results[normalize_algorithm(algorithm)] = row
    return results


def build_parser():
    parser = argparse.ArgumentParser(description="Compare FIFO, LRU and OPT page replacement on trace files")
    parser.add_argument("-r", "--ram-kb", type=int, default=128, help="RAM size in KB (default: 128)")
    parser.add_argument("-a", "--algorithm", action="append", type=str.upper,
                        choices=ALGORITHMS, help="algorithm to run (repeatable, default: all)")
    parser.add_argument("-v", "--verbose", action="store_true", help="print every reference and each run's results")
    parser.add_argument("traces", nargs="+", help="trace files with one '<pid> <page>' per line")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    algorithms = args.algorithm or ALGORITHMS

    results = {}

    for data_file in args.traces:
        trace = load_trace(data_file)
        results[data_file] = {}
        print(f"\n{'#'*60}")
        print(f"# Processing {data_file}")
        print(f"{'#'*60}")

        for algorithm in algorithms:
            simulator = VirtualMemorySimulator(args.ram_kb)
            stats = simulator.run_simulation(trace, algorithm, verbose=args.verbose)
            results[data_file][algorithm] = stats

    # Print summary
    print("\n" + "="*80)
    print("SUMMARY OF ALL RESULTS")
    print("="*80)

    for data_file in args.traces:
        print(f"\n{data_file}:")
        print(f"{'Algorithm':<10} {'Page Faults':<13} {'Page Hits':<11} "
              f"{'Swap Outs':<11} {'Swap Ins':<10} {'Hit Rate':<10}")
        print("-" * 70)
        for algorithm in algorithms:
            s = results[data_file][algorithm]
            print(f"{algorithm:<10} {s.page_faults:<13} {s.page_hits:<11} "
                  f"{s.swap_outs:<11} {s.swap_ins:<10} {s.hit_rate:<.2f}%")

        runs = results[data_file]
        fewest = best_algorithm(runs, 'page_faults', higher_is_better=False)
        best = best_algorithm(runs, 'hit_rate', higher_is_better=True)
        print(f"Fewest Page Faults: {fewest} ({runs[fewest].page_faults})")
        print(f"Best Hit Rate: {best} ({runs[best].hit_rate:.2f}%)")


if __name__ == '__main__':
    main()
