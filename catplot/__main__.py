from catplot.cli import main

raise SystemExit(main())
