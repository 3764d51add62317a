"""
RouteWise - Main Entry Point
============================

Usage:
    python main.py                    # Show help
    python main.py predict            # Predict today's clock-out
    python main.py predict --date 2026-03-04 --log
    python main.py --stats            # Show route averages
"""

import argparse
import os
import sys
from datetime import datetime

# Add project root to path
sys.path.insert(0, os.path.dirname(__file__))

from routewise.config import load_settings
from routewise.paths import (
    HISTORY_FILE,
    PREDICTION_LOG_FILE,
    ROUTE_CONFIG_FILE,
    TODAY_VOLUMES_FILE,
    WAYPOINT_HISTORY_FILE,
)
from routewise.utils import configure_logging, format_clock, local_now, parse_date


def show_stats(history_file: str = HISTORY_FILE):
    """Display route averages by day type and the 722/721/744 summary"""
    from routewise.prediction import InputLoader, calculate_route_averages, summarize_office_times

    if not os.path.exists(history_file):
        print("❌ No route history file found.")
        print(f"   Expected: {history_file}")
        return

    history = InputLoader().load_history(history_file)
    summary = summarize_office_times(history)

    if not summary:
        print("\n📊 No recorded workdays yet.")
        return

    print("\n" + "="*60)
    print("ROUTE STATISTICS")
    print("="*60)

    print(f"\n📊 AVERAGES ({summary['days']} days)")
    print(f"   722 AM office:  {summary['am722']:>4}m")
    print(f"   721 street:     {summary['street721']:>4}m")
    print(f"   744 PM office:  {summary['pm744']:>4}m")
    if summary['pm744P85']:
        print(f"   744 P85 cap:    {summary['pm744P85']:>4}m  (prediction uses {summary['pm744Used']}m)")

    averages = calculate_route_averages(history)
    if averages:
        print(f"\n📅 STREET TIME BY DAY TYPE")
        for day_type, minutes in averages.items():
            print(f"   {day_type:<20} {minutes:>4}m ({minutes / 60:.1f}h)")


def print_prediction(prediction):
    """Print a prediction in carrier-facing form"""
    street = prediction.prediction

    print("\n" + "="*60)
    print("END OF TOUR PREDICTION")
    print("="*60)

    print(f"\n🏢 Office (722):  {prediction.office_time:.0f}m")
    print(f"   Leave office:  {format_clock(prediction.leave_office_time)}")
    print(f"🚚 Street (721):  {prediction.street_time:.0f}m  "
          f"[{street.method}, {street.confidence}, {street.matches_used} matches]")
    print(f"   incl. load truck {prediction.load_truck_time:.0f}m")
    print(f"📋 PM office:     {prediction.pm_office_time:.0f}m "
          f"(avg {prediction.pm_office_avg:.0f}m, P85 {prediction.pm_office_p85:.0f}m)")

    marker = "📍" if prediction.waypoint_enhanced else "🕐"
    print(f"\n{marker} Clock out:     {format_clock(prediction.clock_out_time)} "
          f"± {prediction.uncertainty_minutes}m")
    if prediction.refinement_note and not prediction.waypoint_enhanced:
        print(f"   waypoint refinement not used: {prediction.refinement_note}")

    if prediction.overtime > 0:
        print(f"⚠️  Overtime:      {prediction.overtime:.0f}m")
    else:
        print("✅ No overtime expected")


def run_prediction(history_file: str = HISTORY_FILE,
                   route_file: str = ROUTE_CONFIG_FILE,
                   today_file: str = TODAY_VOLUMES_FILE,
                   date_str: str = None,
                   waypoints_file: str = None,
                   waypoint_history_file: str = WAYPOINT_HISTORY_FILE,
                   route_id: str = None,
                   pause_minutes: float = 0,
                   save_log: bool = False):
    """Load inputs, run the pipeline and print the result"""
    from routewise.prediction import (
        HistoricalWaypointRefiner,
        InputLoader,
        PredictionPipeline,
        save_prediction_to_log,
    )

    settings = load_settings()
    loader = InputLoader()

    try:
        history = loader.load_history(history_file) if os.path.exists(history_file) else []
        route_config = loader.load_route_config(route_file)
        today = loader.load_today_volumes(today_file)
    except FileNotFoundError as e:
        print(f"❌ {e}")
        return None

    now = local_now(settings.timezone)
    service_date = parse_date(date_str) or now.date()
    if date_str:
        now = datetime.combine(service_date, now.time())

    refiner = None
    waypoints = None
    if waypoints_file:
        waypoints = loader.load_waypoints(waypoints_file)
        if os.path.exists(waypoint_history_file):
            refiner = HistoricalWaypointRefiner(loader.load_waypoint_history(waypoint_history_file))
        else:
            print(f"⚠️  No waypoint history at {waypoint_history_file}; skipping refinement")

    print(f"\n📥 {len(history)} history days loaded")

    pipeline = PredictionPipeline(settings=settings, waypoint_refiner=refiner)
    prediction = pipeline.predict(
        today, route_config, history,
        waypoints=waypoints,
        route_id=route_id or 'default',
        waypoint_pause_minutes=pause_minutes,
        service_date=service_date,
        now=now,
    )

    print_prediction(prediction)

    if save_log:
        if save_prediction_to_log(prediction, service_date.isoformat(), PREDICTION_LOG_FILE):
            print(f"\n📋 Logged prediction to {PREDICTION_LOG_FILE}")
        else:
            print(f"\n📋 Prediction for {service_date} already logged. Skipping save.")

    return prediction


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='RouteWise - End of Tour Prediction',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py predict                          Predict today's clock-out
  python main.py predict --date 2026-03-04        Predict a specific day
  python main.py predict --waypoints stops.json   Refine with live progress
  python main.py --stats                          Show route averages
        """
    )

    parser.add_argument('command', nargs='?', choices=['predict'],
                        help='Command to run')
    parser.add_argument('--stats', action='store_true',
                        help='Show route averages by day type')
    parser.add_argument('--history', default=HISTORY_FILE, help='History CSV/JSON')
    parser.add_argument('--route', default=ROUTE_CONFIG_FILE, help='Route config JSON')
    parser.add_argument('--today', default=TODAY_VOLUMES_FILE, help="Today's volumes JSON")
    parser.add_argument('--date', metavar='DATE', help='Service date (YYYY-MM-DD)')
    parser.add_argument('--waypoints', help="Today's waypoints JSON")
    parser.add_argument('--waypoint-history', default=WAYPOINT_HISTORY_FILE,
                        help='Past waypoint timings JSON')
    parser.add_argument('--route-id', help='Route identifier')
    parser.add_argument('--pause', type=float, default=0, help='Paused minutes today')
    parser.add_argument('--log', action='store_true', help='Append prediction to the log')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    # Handle commands
    if args.stats:
        show_stats(args.history)
        return

    if args.command == 'predict':
        run_prediction(
            history_file=args.history,
            route_file=args.route,
            today_file=args.today,
            date_str=args.date,
            waypoints_file=args.waypoints,
            waypoint_history_file=args.waypoint_history,
            route_id=args.route_id,
            pause_minutes=args.pause,
            save_log=args.log,
        )
        return

    # No command given - show help
    parser.print_help()


if __name__ == "__main__":
    main()
