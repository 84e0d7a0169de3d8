import argparse

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from page_table import ProcessTable
from simulator import ALGORITHMS, compare_algorithms, generate_reference_string, load_trace

DEMO_FILES = [
    ('web_browser.bin', 96 * 1024),
    ('text_editor.txt', 24 * 1024),
    ('media_player.bin', 64 * 1024),
    ('file_manager.bin', 16 * 1024),
]


def demo_trace(seed):
    processes = ProcessTable()
    for name, size in DEMO_FILES:
        processes.register(name, size)
    return generate_reference_string(processes, seed=seed)


def plot_comparison(results, output):
    labels = list(results)
    metrics = ['page_faults', 'page_hits', 'swap_outs']
    titles = ['Page Faults', 'Page Hits', 'Swap Outs']

    fig, axes = plt.subplots(1, 3, figsize=(15, 5))
    fig.suptitle('Page Replacement Algorithm Comparison', fontsize=14, fontweight='bold')

    width = 0.8 / len(labels)
    legend_handles = []

    for idx, (metric, title) in enumerate(zip(metrics, titles)):
        ax = axes[idx]
        x = range(len(ALGORITHMS))

        for n, label in enumerate(labels):
            values = [results[label][alg][metric] for alg in ALGORITHMS]
            offset = (n - (len(labels) - 1) / 2) * width
            bars = ax.bar([i + offset for i in x], values, width, label=label)
            if idx == 0:
                legend_handles.append(bars[0])
            for bar in bars:
                height = bar.get_height()
                ax.text(bar.get_x() + bar.get_width()/2., height,
                        f'{int(height)}', ha='center', va='bottom', fontsize=9)

        ax.set_title(title)
        ax.set_xticks(list(x))
        ax.set_xticklabels(ALGORITHMS)
        ax.grid(axis='y', alpha=0.3)

    fig.legend(legend_handles, labels, loc='lower center', ncol=len(labels), frameon=True)

    plt.tight_layout()
    plt.subplots_adjust(bottom=0.15)
    plt.savefig(output, dpi=300, bbox_inches='tight')
    plt.close(fig)
    return output


def main(argv=None):
    parser = argparse.ArgumentParser(description="Chart FIFO, LRU and OPT counters per trace")
    parser.add_argument("-r", "--ram-kb", type=int, default=64, help="RAM size in KB (default: 64)")
    parser.add_argument("-o", "--output", default='algorithm_comparison.png', help="PNG file to write")
    parser.add_argument("-s", "--seed", type=int, default=7, help="seed for the demo reference string")
    parser.add_argument("traces", nargs="*", help="trace files; a generated demo trace when omitted")
    args = parser.parse_args(argv)

    print("Running simulations...")
    if args.traces:
        traces = {name: load_trace(name) for name in args.traces}
    else:
        traces = {'demo': demo_trace(args.seed)}

    results = {name: compare_algorithms(trace, args.ram_kb) for name, trace in traces.items()}
    plot_comparison(results, args.output)
    print(f"\nGraph saved as '{args.output}'")


if __name__ == '__main__':
    main()
