from pf9_upload.cli import main

raise SystemExit(main())
