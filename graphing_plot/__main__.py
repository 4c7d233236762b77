from graphing_plot.cli import main


raise SystemExit(main())
